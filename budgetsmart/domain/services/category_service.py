from typing import List

from sqlalchemy.orm import Session

from budgetsmart.data.repositories.budget_repository import (
    delete_budgets_for_category,
)
from budgetsmart.data.repositories.category_repository import add_category
from budgetsmart.data.repositories.category_repository import (
    delete_category as repo_delete_category,
)
from budgetsmart.data.repositories.category_repository import (
    get_category_by_id,
    list_categories,
)
from budgetsmart.data.repositories.category_repository import (
    update_category as repo_update_category,
)
from budgetsmart.data.repositories.transaction_repository import (
    list_transactions_by_category,
)
from budgetsmart.domain.errors import NotFoundError
from budgetsmart.domain.models import Category
from budgetsmart.domain.services.budget_service import require_user


def _validate_name(name: str) -> str:
    if not name or not name.strip():
        raise ValueError("Category name cannot be empty")
    return name.strip()


def get_categories(db: Session, user_id: str) -> List[Category]:
    require_user(user_id)
    return list_categories(db, user_id)


def get_category(db: Session, user_id: str, category_id: str) -> Category:
    category = get_category_by_id(db, category_id)
    if category is None or category.user_id != user_id:
        raise NotFoundError(f"Category with id {category_id} not found")
    return category


def create_category(
    db: Session, user_id: str, name: str, icon: str = "", color: int = 0
) -> Category:
    require_user(user_id)
    category = Category(
        id="", name=_validate_name(name), icon=icon, color=color, user_id=user_id
    )
    return add_category(db, category)


def update_category(
    db: Session, user_id: str, category_id: str, name: str, icon: str, color: int
) -> Category:
    require_user(user_id)
    category = Category(
        id=category_id,
        name=_validate_name(name),
        icon=icon,
        color=color,
        user_id=user_id,
    )
    if not repo_update_category(db, category):
        raise NotFoundError(f"Category with id {category_id} not found")
    return category


def delete_category(db: Session, user_id: str, category_id: str) -> int:
    """
    Delete a category that no transaction uses, together with its budgets.
    Returns the number of budgets removed.
    """
    require_user(user_id)
    get_category(db, user_id, category_id)
    if list_transactions_by_category(db, user_id, category_id):
        raise ValueError("Cannot delete category as it is used in transactions")
    removed_budgets = delete_budgets_for_category(db, user_id, category_id)
    repo_delete_category(db, category_id, user_id)
    return removed_budgets
