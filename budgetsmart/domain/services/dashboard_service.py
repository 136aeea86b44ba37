import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from budgetsmart.data.repositories.budget_repository import list_budgets
from budgetsmart.data.repositories.category_repository import get_category_by_id
from budgetsmart.data.repositories.transaction_repository import (
    list_recent_transactions,
    list_transactions_by_period,
)
from budgetsmart.domain.helpers.aggregation import compute_financial_summary
from budgetsmart.domain.helpers.sequencing import LatestResultGates
from budgetsmart.domain.models import (
    FinancialSummary,
    Period,
    TransactionWithCategory,
)
from budgetsmart.domain.services.budget_service import require_user

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 4

summary_gates: LatestResultGates[FinancialSummary] = LatestResultGates()


def get_financial_summary(
    db: Session, user_id: str, month: int, year: int
) -> FinancialSummary:
    require_user(user_id)
    period = Period(month=month, year=year)
    transactions = list_transactions_by_period(db, user_id, month, year)
    budgets = list_budgets(db, user_id)
    return compute_financial_summary(transactions, budgets, period)


async def load_latest_financial_summary(
    db: Session, user_id: str, month: int, year: int
) -> Optional[FinancialSummary]:
    gate = summary_gates.for_key(user_id)
    return await gate.run_latest(get_financial_summary, db, user_id, month, year)


def get_recent_transactions(
    db: Session, user_id: str, limit: int = RECENT_TRANSACTIONS_LIMIT
) -> List[TransactionWithCategory]:
    """
    The newest transactions with their categories. Transactions whose
    category is gone are left out, so fewer than ``limit`` may come back.
    """
    require_user(user_id)
    if limit < 1:
        raise ValueError("Limit must be at least 1")
    result = []
    for transaction in list_recent_transactions(db, user_id, limit):
        category = get_category_by_id(db, transaction.category_id)
        if category is None:
            logger.warning(
                "Transaction %s references missing category %s",
                transaction.id,
                transaction.category_id,
            )
            continue
        result.append(TransactionWithCategory(transaction=transaction, category=category))
    return result
