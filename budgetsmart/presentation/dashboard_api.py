from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError
from budgetsmart.domain.helpers.periods import month_year_label
from budgetsmart.domain.models import FinancialSummary, Period, User
from budgetsmart.domain.services.dashboard_service import (
    RECENT_TRANSACTIONS_LIMIT,
    get_recent_transactions,
    load_latest_financial_summary,
)
from budgetsmart.domain.services.user_service import get_current_user, get_db
from budgetsmart.presentation.budgets_api import SUPERSEDED_DETAIL
from budgetsmart.presentation.transactions_api import (
    PeriodResponse,
    TransactionWithCategoryResponse,
    adjacent_period,
    resolve_period,
)
from budgetsmart.utils.currency import format_amount

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class FinancialSummaryResponse(BaseModel):
    month: int
    year: int
    label: str
    total_income: float
    total_expenses: float
    balance: float
    monthly_budget: float
    budget_used_percentage: float
    budgeted_expenses: float
    currency: str
    formatted: Dict[str, str]
    previous: Optional[PeriodResponse]
    next: Optional[PeriodResponse]

    @staticmethod
    def from_domain(
        s: FinancialSummary, period: Period, currency: str
    ) -> "FinancialSummaryResponse":
        return FinancialSummaryResponse(
            month=period.month,
            year=period.year,
            label=month_year_label(period),
            total_income=s.total_income,
            total_expenses=s.total_expenses,
            balance=s.balance,
            monthly_budget=s.monthly_budget,
            budget_used_percentage=s.budget_used_percentage,
            budgeted_expenses=s.budgeted_expenses,
            currency=currency,
            formatted={
                "total_income": format_amount(s.total_income, currency),
                "total_expenses": format_amount(s.total_expenses, currency),
                "balance": format_amount(s.balance, currency),
                "monthly_budget": format_amount(s.monthly_budget, currency),
            },
            previous=adjacent_period(period, -1),
            next=adjacent_period(period, 1),
        )


@router.get("/summary", response_model=FinancialSummaryResponse)
async def get_summary_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    month: Optional[int] = Query(None, ge=0, le=11, description="0-based month"),
    year: Optional[int] = None,
):
    period = resolve_period(month, year)
    try:
        summary = await load_latest_financial_summary(
            db, current_user.id, period.month, period.year
        )
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load data: {e}")
    if summary is None:
        raise HTTPException(status_code=409, detail=SUPERSEDED_DETAIL)
    return FinancialSummaryResponse.from_domain(
        summary, period, current_user.default_currency
    )


@router.get("/recent", response_model=List[TransactionWithCategoryResponse])
def get_recent_transactions_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    limit: int = Query(RECENT_TRANSACTIONS_LIMIT, ge=1, le=50),
):
    try:
        items = get_recent_transactions(db, current_user.id, limit)
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load data: {e}")
    return [
        TransactionWithCategoryResponse.from_domain(i, current_user.default_currency)
        for i in items
    ]
