from datetime import datetime

from sqlalchemy import Column, DateTime, String

from budgetsmart.data.base import Base, engine
from budgetsmart.data.fetch import raises_fetch_error
from budgetsmart.domain.models import User


class UserORM(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True)
    default_currency = Column(String, nullable=False, default="USD")
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def create_user_table():
    Base.metadata.create_all(bind=engine)


def user_to_domain(user_orm: UserORM) -> User:
    return User(
        id=user_orm.id,
        default_currency=user_orm.default_currency,
        created_at=user_orm.created_at,
    )


@raises_fetch_error("getting user")
def get_user(db, user_id: str) -> User | None:
    user = db.query(UserORM).filter(UserORM.id == user_id).first()
    return user_to_domain(user) if user else None


def create_user(db, user: User) -> User:
    db_user = UserORM(
        id=user.id,
        default_currency=user.default_currency,
        created_at=user.created_at,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return user_to_domain(db_user)


def update_user(db, user: User) -> User | None:
    db_user = db.query(UserORM).filter(UserORM.id == user.id).first()
    if not db_user:
        return None
    db_user.default_currency = user.default_currency
    db.commit()
    db.refresh(db_user)
    return user_to_domain(db_user)
