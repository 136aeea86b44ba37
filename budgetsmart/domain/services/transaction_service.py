from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from budgetsmart.data.repositories.category_repository import list_categories
from budgetsmart.data.repositories.transaction_repository import (
    add_transaction as repo_add_transaction,
)
from budgetsmart.data.repositories.transaction_repository import (
    delete_transaction as repo_delete_transaction,
)
from budgetsmart.data.repositories.transaction_repository import (
    get_transaction_by_id,
    list_transactions_by_period,
)
from budgetsmart.data.repositories.transaction_repository import (
    update_transaction as repo_update_transaction,
)
from budgetsmart.domain.errors import NotFoundError
from budgetsmart.domain.helpers.aggregation import (
    filter_by_transaction_type,
    join_categories,
)
from budgetsmart.domain.helpers.periods import as_local_naive
from budgetsmart.domain.models import (
    Period,
    Transaction,
    TransactionFilterType,
    TransactionType,
    TransactionWithCategory,
)
from budgetsmart.domain.services.budget_service import require_user
from budgetsmart.domain.services.category_service import get_category


def _validate(db: Session, user_id: str, amount: float, category_id: str) -> None:
    if amount <= 0:
        raise ValueError("Transaction amount must be greater than zero")
    get_category(db, user_id, category_id)


def add_transaction(
    db: Session,
    user_id: str,
    amount: float,
    description: str,
    category_id: str,
    transaction_type: TransactionType,
    date: Optional[datetime] = None,
) -> Transaction:
    require_user(user_id)
    _validate(db, user_id, amount, category_id)
    transaction = Transaction(
        id="",
        amount=amount,
        description=description or "",
        category_id=category_id,
        date=as_local_naive(date) or datetime.now(),
        type=transaction_type,
        user_id=user_id,
    )
    return repo_add_transaction(db, transaction)


def update_transaction(db: Session, user_id: str, transaction: Transaction) -> Transaction:
    """Full replace of an existing transaction."""
    require_user(user_id)
    _validate(db, user_id, transaction.amount, transaction.category_id)
    transaction.user_id = user_id
    transaction.date = as_local_naive(transaction.date)
    if not repo_update_transaction(db, transaction):
        raise NotFoundError(f"Transaction with id {transaction.id} not found")
    return transaction


def delete_transaction(db: Session, user_id: str, transaction_id: str) -> None:
    require_user(user_id)
    if not repo_delete_transaction(db, transaction_id, user_id):
        raise NotFoundError(f"Transaction with id {transaction_id} not found")


def get_transaction(db: Session, user_id: str, transaction_id: str) -> Transaction:
    transaction = get_transaction_by_id(db, transaction_id)
    if transaction is None or transaction.user_id != user_id:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")
    return transaction


def list_transactions_for_period(
    db: Session,
    user_id: str,
    month: int,
    year: int,
    filter_type: TransactionFilterType = TransactionFilterType.ALL,
) -> List[TransactionWithCategory]:
    require_user(user_id)
    Period(month=month, year=year)
    transactions = filter_by_transaction_type(
        list_transactions_by_period(db, user_id, month, year), filter_type
    )
    categories = list_categories(db, user_id)
    return join_categories(transactions, categories)
