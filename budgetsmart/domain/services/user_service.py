from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from budgetsmart.data.base import SessionLocal
from budgetsmart.data.repositories.user_repository import create_user, create_user_table
from budgetsmart.data.repositories.user_repository import get_user as repo_get_user
from budgetsmart.data.repositories.user_repository import update_user
from budgetsmart.domain.errors import FetchError, NotFoundError
from budgetsmart.domain.models import User
from budgetsmart.utils.currency import SUPPORTED_CURRENCIES

create_user_table()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def validate_currency(code: str) -> str:
    code = (code or "").upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency: {code}")
    return code


def register_user(db: Session, user_id: str, default_currency: str = "USD") -> User:
    user_id = (user_id or "").strip()
    if not user_id:
        raise ValueError("User id cannot be empty")
    currency = validate_currency(default_currency)
    if repo_get_user(db, user_id):
        raise ValueError("User already registered")
    return create_user(db, User(id=user_id, default_currency=currency))


def get_user(db: Session, user_id: str) -> User:
    user = repo_get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def change_currency(db: Session, user_id: str, currency: str) -> User:
    user = get_user(db, user_id)
    user.default_currency = validate_currency(currency)
    update_user(db, user)
    return user


def get_current_user(
    x_user_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the caller from the X-User-Id header set by the identity provider.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="User not authenticated",
    )
    if not x_user_id:
        raise credentials_exception
    try:
        user = repo_get_user(db, x_user_id)
    except FetchError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to load user: {e}",
        )
    if user is None:
        raise credentials_exception
    return user
