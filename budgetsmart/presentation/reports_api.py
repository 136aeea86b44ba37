from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError
from budgetsmart.domain.helpers.aggregation import with_percentages
from budgetsmart.domain.models import (
    CategoryExpenseData,
    MonthlyExpenseData,
    ReportData,
    ReportType,
    TimePeriod,
    User,
)
from budgetsmart.domain.services.report_service import get_report
from budgetsmart.domain.services.user_service import get_current_user, get_db

router = APIRouter(prefix="/api/reports", tags=["reports"])


class MonthlyExpenseResponse(BaseModel):
    year: int
    month: int
    month_name: str
    amount: float

    @staticmethod
    def from_domain(m: MonthlyExpenseData) -> "MonthlyExpenseResponse":
        return MonthlyExpenseResponse(
            year=m.year, month=m.month, month_name=m.month_name, amount=m.amount
        )


class CategoryExpenseResponse(BaseModel):
    category_id: str
    category_name: str
    category_color: int
    amount: float
    percentage: float

    @staticmethod
    def from_domain(c: CategoryExpenseData) -> "CategoryExpenseResponse":
        return CategoryExpenseResponse(
            category_id=c.category_id,
            category_name=c.category_name,
            category_color=c.category_color,
            amount=c.amount,
            percentage=c.percentage,
        )


class ReportResponse(BaseModel):
    report_type: str
    start_date: datetime
    end_date: datetime
    monthly: List[MonthlyExpenseResponse]
    categories: List[CategoryExpenseResponse]
    top_categories: List[CategoryExpenseResponse]
    orphaned_category_ids: List[str]

    @staticmethod
    def from_domain(r: ReportData) -> "ReportResponse":
        categories = with_percentages(r.categories)
        top = categories[: len(r.top_categories)]
        return ReportResponse(
            report_type=r.report_type.value,
            start_date=r.start_date,
            end_date=r.end_date,
            monthly=[MonthlyExpenseResponse.from_domain(m) for m in r.monthly],
            categories=[CategoryExpenseResponse.from_domain(c) for c in categories],
            top_categories=[CategoryExpenseResponse.from_domain(c) for c in top],
            orphaned_category_ids=r.orphaned_category_ids,
        )


@router.get("", response_model=ReportResponse)
def get_report_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    report_type: ReportType = Query(ReportType.EXPENSES),
    time_period: TimePeriod = Query(TimePeriod.LAST_3_MONTHS),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    try:
        report = get_report(
            db, current_user.id, report_type, time_period, start_date, end_date
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load report data: {e}")
    return ReportResponse.from_domain(report)
