import logging
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from budgetsmart.domain.helpers.periods import in_range
from budgetsmart.domain.models import (
    Budget,
    BudgetOverview,
    BudgetStatus,
    Category,
    CategoryExpenseData,
    FinancialSummary,
    MonthlyExpenseData,
    Period,
    ReportData,
    ReportType,
    Transaction,
    TransactionFilterType,
    TransactionType,
    TransactionWithCategory,
)

logger = logging.getLogger(__name__)

TOP_CATEGORIES_COUNT = 4

REPORT_TYPE_FILTERS = {
    ReportType.EXPENSES: {TransactionType.EXPENSE},
    ReportType.INCOME: {TransactionType.INCOME},
    ReportType.ALL: {TransactionType.EXPENSE, TransactionType.INCOME},
}

TRANSACTION_FILTERS = {
    TransactionFilterType.EXPENSE: {TransactionType.EXPENSE},
    TransactionFilterType.INCOME: {TransactionType.INCOME},
    TransactionFilterType.ALL: {TransactionType.EXPENSE, TransactionType.INCOME},
}


def percentage_of(part: float, whole: float) -> float:
    if whole > 0:
        return (part / whole) * 100
    return 0.0


def budgets_in_period(budgets: Iterable[Budget], period: Period) -> List[Budget]:
    return [b for b in budgets if b.month == period.month and b.year == period.year]


def index_categories(categories: Iterable[Category]) -> Dict[str, Category]:
    return {c.id: c for c in categories}


def _log_orphans(kind: str, orphaned: List[str]) -> None:
    if orphaned:
        logger.warning(
            "Dropped %d %s referencing missing categories: %s",
            len(orphaned),
            kind,
            ", ".join(orphaned),
        )


def compute_budget_overview(
    budgets: Iterable[Budget],
    categories: Iterable[Category],
    transactions: Iterable[Transaction],
    period: Period,
) -> BudgetOverview:
    """
    Roll up spending against every budget of ``period``.

    Budgets whose category no longer exists are left out of the statuses and
    totals; their category ids are reported in ``orphaned_category_ids``.
    Statuses are ordered by percentage used, highest first, keeping input
    order for equal percentages.
    """
    categories_by_id = index_categories(categories)
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    statuses: List[BudgetStatus] = []
    orphaned: List[str] = []
    total_budget = 0.0
    total_spent = 0.0

    for budget in budgets_in_period(budgets, period):
        category = categories_by_id.get(budget.category_id)
        if category is None:
            orphaned.append(budget.category_id)
            continue

        spent = sum(t.amount for t in expenses if t.category_id == budget.category_id)
        statuses.append(
            BudgetStatus(
                budget=budget,
                category=category,
                spent=spent,
                remaining=budget.amount - spent,
                percentage=percentage_of(spent, budget.amount),
            )
        )
        total_budget += budget.amount
        total_spent += spent

    _log_orphans("budgets", orphaned)
    statuses.sort(key=lambda s: s.percentage, reverse=True)

    return BudgetOverview(
        period=period,
        statuses=statuses,
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        percentage=percentage_of(total_spent, total_budget),
        orphaned_category_ids=orphaned,
    )


def compute_financial_summary(
    transactions: Iterable[Transaction], budgets: Iterable[Budget], period: Period
) -> FinancialSummary:
    """
    Income, expenses and budget usage for one month.

    ``budget_used_percentage`` only counts expenses in categories that have a
    budget this month, so unbudgeted spending does not move it.
    """
    period_budgets = budgets_in_period(budgets, period)
    budgeted_categories = {b.category_id for b in period_budgets}

    total_income = 0.0
    total_expenses = 0.0
    budgeted_expenses = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            total_income += t.amount
        elif t.type == TransactionType.EXPENSE:
            total_expenses += t.amount
            if t.category_id in budgeted_categories:
                budgeted_expenses += t.amount

    monthly_budget = sum(b.amount for b in period_budgets)
    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        monthly_budget=monthly_budget,
        budget_used_percentage=percentage_of(budgeted_expenses, monthly_budget),
        budgeted_expenses=budgeted_expenses,
    )


def filter_transactions_in_range(
    transactions: Iterable[Transaction], start: datetime, end: datetime
) -> List[Transaction]:
    return [t for t in transactions if in_range(t.date, start, end)]


def filter_by_report_type(
    transactions: Iterable[Transaction], report_type: ReportType
) -> List[Transaction]:
    allowed = REPORT_TYPE_FILTERS[report_type]
    return [t for t in transactions if t.type in allowed]


def filter_by_transaction_type(
    transactions: Iterable[Transaction], filter_type: TransactionFilterType
) -> List[Transaction]:
    allowed = TRANSACTION_FILTERS[filter_type]
    return [t for t in transactions if t.type in allowed]


def bucket_by_month(transactions: Iterable[Transaction]) -> List[MonthlyExpenseData]:
    totals: Dict[Tuple[int, int], float] = {}
    for t in transactions:
        key = (t.date.year, t.date.month - 1)
        totals[key] = totals.get(key, 0.0) + t.amount
    monthly = [
        MonthlyExpenseData(year=year, month=month, amount=amount)
        for (year, month), amount in totals.items()
    ]
    monthly.sort(key=lambda m: m.year * 100 + m.month)
    return monthly


def bucket_by_category(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> Tuple[List[CategoryExpenseData], List[str]]:
    """
    Sum amounts per category, largest first.

    Returns the buckets and the ids of categories that could not be resolved;
    amounts of unresolved categories are dropped, never reassigned.
    """
    categories_by_id = index_categories(categories)
    totals: Dict[str, float] = {}
    for t in transactions:
        totals[t.category_id] = totals.get(t.category_id, 0.0) + t.amount

    buckets: List[CategoryExpenseData] = []
    orphaned: List[str] = []
    for category_id, amount in totals.items():
        category = categories_by_id.get(category_id)
        if category is None:
            orphaned.append(category_id)
            continue
        buckets.append(
            CategoryExpenseData(
                category_id=category_id,
                category_name=category.name,
                category_color=category.color,
                amount=amount,
            )
        )
    _log_orphans("report buckets", orphaned)
    buckets.sort(key=lambda c: c.amount, reverse=True)
    return buckets, orphaned


def with_percentages(items: List[CategoryExpenseData]) -> List[CategoryExpenseData]:
    total = sum(item.amount for item in items)
    return [
        CategoryExpenseData(
            category_id=item.category_id,
            category_name=item.category_name,
            category_color=item.category_color,
            amount=item.amount,
            percentage=percentage_of(item.amount, total),
        )
        for item in items
    ]


def build_report(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    report_type: ReportType,
    start: datetime,
    end: datetime,
) -> ReportData:
    selected = filter_by_report_type(
        filter_transactions_in_range(transactions, start, end), report_type
    )
    by_category, orphaned = bucket_by_category(selected, categories)
    return ReportData(
        report_type=report_type,
        start_date=start,
        end_date=end,
        monthly=bucket_by_month(selected),
        categories=by_category,
        top_categories=by_category[:TOP_CATEGORIES_COUNT],
        orphaned_category_ids=orphaned,
    )


def join_categories(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> List[TransactionWithCategory]:
    categories_by_id = index_categories(categories)
    joined = []
    orphaned = []
    for t in transactions:
        category = categories_by_id.get(t.category_id)
        if category is None:
            orphaned.append(t.category_id)
            continue
        joined.append(TransactionWithCategory(transaction=t, category=category))
    _log_orphans("transactions", orphaned)
    return joined
