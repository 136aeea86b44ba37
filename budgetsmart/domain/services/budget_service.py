from typing import Optional

from sqlalchemy.orm import Session

from budgetsmart.data.repositories.budget_repository import (
    add_budget,
    create_budget_table,
)
from budgetsmart.data.repositories.budget_repository import (
    delete_budget as repo_delete_budget,
)
from budgetsmart.data.repositories.budget_repository import (
    get_budget_for_period,
    list_budgets,
    update_budget,
)
from budgetsmart.data.repositories.category_repository import (
    create_category_table,
    get_category_by_id,
    list_categories,
)
from budgetsmart.data.repositories.transaction_repository import (
    create_transaction_table,
    list_transactions_by_period,
)
from budgetsmart.domain.errors import NotFoundError
from budgetsmart.domain.helpers.aggregation import compute_budget_overview
from budgetsmart.domain.helpers.sequencing import LatestResultGates
from budgetsmart.domain.models import Budget, BudgetOverview, Period

create_budget_table()
create_category_table()
create_transaction_table()

overview_gates: LatestResultGates[BudgetOverview] = LatestResultGates()


def require_user(user_id: str) -> None:
    if not user_id:
        raise ValueError("User not authenticated")


def get_budget_overview(
    db: Session, user_id: str, month: int, year: int
) -> BudgetOverview:
    """
    Budget statuses and totals for one month.

    All three collections are fetched before anything is computed; a
    FetchError from any of them aborts the whole overview.
    """
    require_user(user_id)
    period = Period(month=month, year=year)
    budgets = list_budgets(db, user_id)
    categories = list_categories(db, user_id)
    transactions = list_transactions_by_period(db, user_id, month, year)
    return compute_budget_overview(budgets, categories, transactions, period)


async def load_latest_budget_overview(
    db: Session, user_id: str, month: int, year: int
) -> Optional[BudgetOverview]:
    """
    ``get_budget_overview`` for month navigation. Returns None when a newer
    overview request of the same user was issued while this one ran.
    """
    gate = overview_gates.for_key(user_id)
    return await gate.run_latest(get_budget_overview, db, user_id, month, year)


def save_budget(
    db: Session,
    user_id: str,
    category_id: str,
    amount: float,
    month: int,
    year: int,
) -> Budget:
    """Create the budget for (category, month, year) or replace its amount."""
    require_user(user_id)
    period = Period(month=month, year=year)
    if amount < 0:
        raise ValueError("Budget amount cannot be negative")
    category = get_category_by_id(db, category_id)
    if category is None or category.user_id != user_id:
        raise NotFoundError(f"Category with id {category_id} not found")

    existing = get_budget_for_period(
        db, user_id, category_id, period.month, period.year
    )
    if existing is not None:
        existing.amount = amount
        update_budget(db, existing)
        return existing

    return add_budget(
        db,
        Budget(
            id="",
            category_id=category_id,
            amount=amount,
            month=period.month,
            year=period.year,
            user_id=user_id,
        ),
    )


def delete_budget(db: Session, user_id: str, budget_id: str) -> None:
    require_user(user_id)
    if not repo_delete_budget(db, budget_id, user_id):
        raise NotFoundError(f"Budget with id {budget_id} not found")
