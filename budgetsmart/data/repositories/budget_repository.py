import uuid

from sqlalchemy import Column, Float, Integer, String, UniqueConstraint

from budgetsmart.data.base import Base, engine
from budgetsmart.data.fetch import raises_fetch_error
from budgetsmart.domain.models import Budget


class BudgetORM(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "month", "year"),
    )
    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    category_id = Column(String, index=True, nullable=False)
    amount = Column(Float, nullable=False)
    month = Column(Integer, nullable=False)  # 0-based
    year = Column(Integer, nullable=False)
    user_id = Column(String, index=True, nullable=False)


def create_budget_table():
    Base.metadata.create_all(bind=engine)


def budget_to_domain(budget_orm: BudgetORM) -> Budget:
    return Budget(
        id=budget_orm.id,
        category_id=budget_orm.category_id,
        amount=budget_orm.amount,
        month=budget_orm.month,
        year=budget_orm.year,
        user_id=budget_orm.user_id,
    )


@raises_fetch_error("listing budgets")
def list_budgets(db, user_id: str) -> list[Budget]:
    budgets = db.query(BudgetORM).filter(BudgetORM.user_id == user_id).all()
    return [budget_to_domain(b) for b in budgets]


@raises_fetch_error("getting budget for period")
def get_budget_for_period(
    db, user_id: str, category_id: str, month: int, year: int
) -> Budget | None:
    budget = (
        db.query(BudgetORM)
        .filter_by(user_id=user_id, category_id=category_id, month=month, year=year)
        .first()
    )
    return budget_to_domain(budget) if budget else None


def add_budget(db, budget: Budget) -> Budget:
    budget_orm = BudgetORM(
        id=budget.id or uuid.uuid4().hex,
        category_id=budget.category_id,
        amount=budget.amount,
        month=budget.month,
        year=budget.year,
        user_id=budget.user_id,
    )
    db.add(budget_orm)
    db.commit()
    db.refresh(budget_orm)
    return budget_to_domain(budget_orm)


def update_budget(db, budget: Budget) -> bool:
    if not budget.id:
        return False
    budget_orm = (
        db.query(BudgetORM).filter_by(id=budget.id, user_id=budget.user_id).first()
    )
    if not budget_orm:
        return False
    budget_orm.category_id = budget.category_id
    budget_orm.amount = budget.amount
    budget_orm.month = budget.month
    budget_orm.year = budget.year
    db.commit()
    return True


def delete_budget(db, budget_id: str, user_id: str) -> bool:
    deleted = (
        db.query(BudgetORM)
        .filter(BudgetORM.id == budget_id, BudgetORM.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def delete_budgets_for_category(db, user_id: str, category_id: str) -> int:
    deleted = (
        db.query(BudgetORM)
        .filter(BudgetORM.user_id == user_id, BudgetORM.category_id == category_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
