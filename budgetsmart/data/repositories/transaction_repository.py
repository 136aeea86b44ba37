import uuid

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, String

from budgetsmart.data.base import Base, engine
from budgetsmart.data.fetch import raises_fetch_error
from budgetsmart.domain.helpers.periods import period_bounds
from budgetsmart.domain.models import Transaction, TransactionType


class TransactionORM(Base):
    __tablename__ = "transactions"
    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    amount = Column(Float, nullable=False)
    description = Column(String, default="")
    category_id = Column(String, index=True, nullable=False)
    date = Column(DateTime, nullable=False)
    type = Column(SAEnum(TransactionType), nullable=False)
    user_id = Column(String, index=True, nullable=False)


def create_transaction_table():
    Base.metadata.create_all(bind=engine)


def transaction_to_domain(transaction_orm: TransactionORM) -> Transaction:
    return Transaction(
        id=transaction_orm.id,
        amount=transaction_orm.amount,
        description=transaction_orm.description,
        category_id=transaction_orm.category_id,
        date=transaction_orm.date,
        type=transaction_orm.type,
        user_id=transaction_orm.user_id,
    )


def _user_query(db, user_id: str):
    return db.query(TransactionORM).filter(TransactionORM.user_id == user_id)


@raises_fetch_error("listing transactions")
def list_transactions(db, user_id: str) -> list[Transaction]:
    transactions = _user_query(db, user_id).order_by(TransactionORM.date.desc()).all()
    return [transaction_to_domain(t) for t in transactions]


@raises_fetch_error("listing transactions by period")
def list_transactions_by_period(
    db, user_id: str, month: int, year: int
) -> list[Transaction]:
    start, end = period_bounds(month, year)
    transactions = (
        _user_query(db, user_id)
        .filter(TransactionORM.date >= start, TransactionORM.date <= end)
        .order_by(TransactionORM.date.desc())
        .all()
    )
    return [transaction_to_domain(t) for t in transactions]


@raises_fetch_error("listing transactions by category")
def list_transactions_by_category(
    db, user_id: str, category_id: str
) -> list[Transaction]:
    transactions = (
        _user_query(db, user_id)
        .filter(TransactionORM.category_id == category_id)
        .order_by(TransactionORM.date.desc())
        .all()
    )
    return [transaction_to_domain(t) for t in transactions]


@raises_fetch_error("listing recent transactions")
def list_recent_transactions(db, user_id: str, limit: int) -> list[Transaction]:
    transactions = (
        _user_query(db, user_id)
        .order_by(TransactionORM.date.desc())
        .limit(limit)
        .all()
    )
    return [transaction_to_domain(t) for t in transactions]


@raises_fetch_error("getting transaction")
def get_transaction_by_id(db, transaction_id: str) -> Transaction | None:
    transaction = (
        db.query(TransactionORM).filter(TransactionORM.id == transaction_id).first()
    )
    return transaction_to_domain(transaction) if transaction else None


def add_transaction(db, transaction: Transaction) -> Transaction:
    transaction_orm = TransactionORM(
        id=transaction.id or uuid.uuid4().hex,
        amount=transaction.amount,
        description=transaction.description,
        category_id=transaction.category_id,
        date=transaction.date,
        type=transaction.type,
        user_id=transaction.user_id,
    )
    db.add(transaction_orm)
    db.commit()
    db.refresh(transaction_orm)
    return transaction_to_domain(transaction_orm)


def update_transaction(db, transaction: Transaction) -> bool:
    transaction_orm = (
        db.query(TransactionORM)
        .filter_by(id=transaction.id, user_id=transaction.user_id)
        .first()
    )
    if not transaction_orm:
        return False
    transaction_orm.amount = transaction.amount
    transaction_orm.description = transaction.description
    transaction_orm.category_id = transaction.category_id
    transaction_orm.date = transaction.date
    transaction_orm.type = transaction.type
    db.commit()
    return True


def delete_transaction(db, transaction_id: str, user_id: str) -> bool:
    deleted = (
        db.query(TransactionORM)
        .filter(TransactionORM.id == transaction_id, TransactionORM.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
