from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError, NotFoundError
from budgetsmart.domain.helpers.periods import month_year_label, shift_period
from budgetsmart.domain.models import (
    Period,
    Transaction,
    TransactionFilterType,
    TransactionType,
    TransactionWithCategory,
    User,
)
from budgetsmart.domain.services.transaction_service import (
    add_transaction,
    delete_transaction,
    list_transactions_for_period,
    update_transaction,
)
from budgetsmart.domain.services.user_service import get_current_user, get_db
from budgetsmart.presentation.categories_api import CategoryResponse
from budgetsmart.utils.currency import format_with_sign

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


class TransactionRequest(BaseModel):
    amount: float
    description: str = ""
    category_id: str
    type: TransactionType = TransactionType.EXPENSE
    date: Optional[datetime] = None


class TransactionResponse(BaseModel):
    id: str
    amount: float
    description: str
    category_id: str
    date: datetime
    type: str

    @staticmethod
    def from_domain(t: Transaction) -> "TransactionResponse":
        return TransactionResponse(
            id=t.id,
            amount=t.amount,
            description=t.description,
            category_id=t.category_id,
            date=t.date,
            type=t.type.value,
        )


class TransactionWithCategoryResponse(BaseModel):
    transaction: TransactionResponse
    category: CategoryResponse
    display_amount: str

    @staticmethod
    def from_domain(
        item: TransactionWithCategory, currency: str
    ) -> "TransactionWithCategoryResponse":
        t = item.transaction
        signed = -t.amount if t.type == TransactionType.EXPENSE else t.amount
        return TransactionWithCategoryResponse(
            transaction=TransactionResponse.from_domain(t),
            category=CategoryResponse.from_domain(item.category),
            display_amount=format_with_sign(signed, currency, force_sign=True),
        )


class PeriodResponse(BaseModel):
    month: int
    year: int
    label: str

    @staticmethod
    def from_domain(p: Period) -> "PeriodResponse":
        return PeriodResponse(month=p.month, year=p.year, label=month_year_label(p))


def resolve_period(month: Optional[int], year: Optional[int]) -> Period:
    current = Period.current()
    try:
        return Period(
            month=current.month if month is None else month,
            year=current.year if year is None else year,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def adjacent_period(period: Period, offset: int) -> Optional[PeriodResponse]:
    try:
        return PeriodResponse.from_domain(shift_period(period, offset))
    except ValueError:
        # no months before year 1 or after 9999
        return None


@router.get("", response_model=List[TransactionWithCategoryResponse])
def list_transactions_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    month: Optional[int] = Query(None, ge=0, le=11, description="0-based month"),
    year: Optional[int] = None,
    filter_type: TransactionFilterType = Query(
        TransactionFilterType.ALL, alias="filter"
    ),
):
    period = resolve_period(month, year)
    try:
        items = list_transactions_for_period(
            db, current_user.id, period.month, period.year, filter_type
        )
    except FetchError as e:
        raise HTTPException(
            status_code=503, detail=f"Failed to load transactions: {e}"
        )
    return [
        TransactionWithCategoryResponse.from_domain(i, current_user.default_currency)
        for i in items
    ]


@router.post("", response_model=TransactionResponse, status_code=201)
def add_transaction_endpoint(
    req: TransactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        transaction = add_transaction(
            db,
            current_user.id,
            req.amount,
            req.description,
            req.category_id,
            req.type,
            req.date,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to save transaction: {e}")
    return TransactionResponse.from_domain(transaction)


class UpdateTransactionRequest(TransactionRequest):
    date: datetime = Field(..., description="Full replace: the date is required")


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction_endpoint(
    transaction_id: str,
    req: UpdateTransactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    transaction = Transaction(
        id=transaction_id,
        amount=req.amount,
        description=req.description,
        category_id=req.category_id,
        date=req.date,
        type=req.type,
        user_id=current_user.id,
    )
    try:
        updated = update_transaction(db, current_user.id, transaction)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to save transaction: {e}")
    return TransactionResponse.from_domain(updated)


@router.delete("/{transaction_id}")
def delete_transaction_endpoint(
    transaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        delete_transaction(db, current_user.id, transaction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": True}
