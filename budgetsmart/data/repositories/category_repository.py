import uuid

from sqlalchemy import Column, Integer, String

from budgetsmart.data.base import Base, engine
from budgetsmart.data.fetch import raises_fetch_error
from budgetsmart.domain.models import Category


class CategoryORM(Base):
    __tablename__ = "categories"
    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False)
    icon = Column(String, default="")
    color = Column(Integer, default=0)
    user_id = Column(String, index=True, nullable=False)


def create_category_table():
    Base.metadata.create_all(bind=engine)


def category_to_domain(category_orm: CategoryORM) -> Category:
    return Category(
        id=category_orm.id,
        name=category_orm.name,
        icon=category_orm.icon,
        color=category_orm.color,
        user_id=category_orm.user_id,
    )


@raises_fetch_error("listing categories")
def list_categories(db, user_id: str) -> list[Category]:
    categories = (
        db.query(CategoryORM)
        .filter(CategoryORM.user_id == user_id)
        .order_by(CategoryORM.name)
        .all()
    )
    return [category_to_domain(c) for c in categories]


@raises_fetch_error("getting category")
def get_category_by_id(db, category_id: str) -> Category | None:
    category = db.query(CategoryORM).filter(CategoryORM.id == category_id).first()
    return category_to_domain(category) if category else None


def add_category(db, category: Category) -> Category:
    category_orm = CategoryORM(
        id=category.id or uuid.uuid4().hex,
        name=category.name,
        icon=category.icon,
        color=category.color,
        user_id=category.user_id,
    )
    db.add(category_orm)
    db.commit()
    db.refresh(category_orm)
    return category_to_domain(category_orm)


def update_category(db, category: Category) -> bool:
    category_orm = (
        db.query(CategoryORM)
        .filter_by(id=category.id, user_id=category.user_id)
        .first()
    )
    if not category_orm:
        return False
    category_orm.name = category.name
    category_orm.icon = category.icon
    category_orm.color = category.color
    db.commit()
    return True


def delete_category(db, category_id: str, user_id: str) -> bool:
    deleted = (
        db.query(CategoryORM)
        .filter(CategoryORM.id == category_id, CategoryORM.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
