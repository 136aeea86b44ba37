from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from budgetsmart.data.repositories.category_repository import list_categories
from budgetsmart.data.repositories.transaction_repository import list_transactions
from budgetsmart.domain.helpers.aggregation import build_report
from budgetsmart.domain.helpers.periods import as_local_naive, resolve_date_range
from budgetsmart.domain.models import ReportData, ReportType, TimePeriod
from budgetsmart.domain.services.budget_service import require_user


def get_report(
    db: Session,
    user_id: str,
    report_type: ReportType = ReportType.EXPENSES,
    time_period: TimePeriod = TimePeriod.LAST_3_MONTHS,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> ReportData:
    """
    Monthly series and category breakdown for a report window.

    All of the user's transactions are fetched and filtered to the inclusive
    window here, not in the query.
    """
    require_user(user_id)
    start, end = resolve_date_range(
        time_period,
        now=now,
        start=as_local_naive(start_date),
        end=as_local_naive(end_date),
    )
    transactions = list_transactions(db, user_id)
    categories = list_categories(db, user_id)
    return build_report(transactions, categories, report_type, start, end)
