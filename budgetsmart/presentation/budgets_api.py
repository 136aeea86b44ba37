from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError, NotFoundError
from budgetsmart.domain.helpers.periods import month_year_label
from budgetsmart.domain.models import Budget, BudgetOverview, BudgetStatus, User
from budgetsmart.domain.services.budget_service import (
    delete_budget,
    load_latest_budget_overview,
    save_budget,
)
from budgetsmart.domain.services.user_service import get_current_user, get_db
from budgetsmart.presentation.categories_api import CategoryResponse
from budgetsmart.presentation.transactions_api import (
    PeriodResponse,
    adjacent_period,
    resolve_period,
)

router = APIRouter(prefix="/api/budgets", tags=["budgets"])

SUPERSEDED_DETAIL = "Superseded by a newer request"


class SaveBudgetRequest(BaseModel):
    category_id: str
    amount: float
    month: Optional[int] = None
    year: Optional[int] = None


class BudgetResponse(BaseModel):
    id: str
    category_id: str
    amount: float
    month: int
    year: int

    @staticmethod
    def from_domain(b: Budget) -> "BudgetResponse":
        return BudgetResponse(
            id=b.id,
            category_id=b.category_id,
            amount=b.amount,
            month=b.month,
            year=b.year,
        )


class BudgetStatusResponse(BaseModel):
    budget: BudgetResponse
    category: CategoryResponse
    spent: float
    remaining: float
    percentage: float
    is_over_budget: bool

    @staticmethod
    def from_domain(s: BudgetStatus) -> "BudgetStatusResponse":
        return BudgetStatusResponse(
            budget=BudgetResponse.from_domain(s.budget),
            category=CategoryResponse.from_domain(s.category),
            spent=s.spent,
            remaining=s.remaining,
            percentage=s.percentage,
            is_over_budget=s.is_over_budget,
        )


class BudgetOverviewResponse(BaseModel):
    month: int
    year: int
    label: str
    statuses: List[BudgetStatusResponse]
    total_budget: float
    total_spent: float
    total_remaining: float
    percentage: float
    orphaned_category_ids: List[str]
    previous: Optional[PeriodResponse]
    next: Optional[PeriodResponse]

    @staticmethod
    def from_domain(o: BudgetOverview) -> "BudgetOverviewResponse":
        return BudgetOverviewResponse(
            month=o.period.month,
            year=o.period.year,
            label=month_year_label(o.period),
            statuses=[BudgetStatusResponse.from_domain(s) for s in o.statuses],
            total_budget=o.total_budget,
            total_spent=o.total_spent,
            total_remaining=o.total_remaining,
            percentage=o.percentage,
            orphaned_category_ids=o.orphaned_category_ids,
            previous=adjacent_period(o.period, -1),
            next=adjacent_period(o.period, 1),
        )


@router.get("", response_model=BudgetOverviewResponse)
async def get_budget_overview_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    month: Optional[int] = Query(None, ge=0, le=11, description="0-based month"),
    year: Optional[int] = None,
):
    period = resolve_period(month, year)
    try:
        overview = await load_latest_budget_overview(
            db, current_user.id, period.month, period.year
        )
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load budget data: {e}")
    if overview is None:
        raise HTTPException(status_code=409, detail=SUPERSEDED_DETAIL)
    return BudgetOverviewResponse.from_domain(overview)


@router.put("", response_model=BudgetResponse)
def save_budget_endpoint(
    req: SaveBudgetRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    period = resolve_period(req.month, req.year)
    try:
        budget = save_budget(
            db, current_user.id, req.category_id, req.amount, period.month, period.year
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to save budget: {e}")
    return BudgetResponse.from_domain(budget)


@router.delete("/{budget_id}")
def delete_budget_endpoint(
    budget_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        delete_budget(db, current_user.id, budget_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": True}
