from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError
from budgetsmart.domain.models import User
from budgetsmart.domain.services.user_service import (
    change_currency,
    get_current_user,
    get_db,
    register_user,
)
from budgetsmart.utils.currency import SUPPORTED_CURRENCIES, currency_display_text

router = APIRouter(prefix="/api/users", tags=["users"])


class UserCreateRequest(BaseModel):
    id: str
    default_currency: str = "USD"


class ChangeCurrencyRequest(BaseModel):
    currency: str


class UserResponse(BaseModel):
    id: str
    default_currency: str
    currency_display: str
    created_at: datetime

    @staticmethod
    def from_domain(user: User) -> "UserResponse":
        return UserResponse(
            id=user.id,
            default_currency=user.default_currency,
            currency_display=currency_display_text(user.default_currency),
            created_at=user.created_at,
        )


@router.post("", response_model=UserResponse, status_code=201)
def register_user_endpoint(req: UserCreateRequest, db: Session = Depends(get_db)):
    try:
        user = register_user(db, req.id, req.default_currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to register user: {e}")
    return UserResponse.from_domain(user)


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return UserResponse.from_domain(current_user)


@router.put("/me/currency", response_model=UserResponse)
def change_currency_endpoint(
    req: ChangeCurrencyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user = change_currency(db, current_user.id, req.currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to change currency: {e}")
    return UserResponse.from_domain(user)


@router.get("/currencies")
def list_supported_currencies():
    return [
        {"code": c.code, "name": c.name, "symbol": c.symbol}
        for c in SUPPORTED_CURRENCIES.values()
    ]
