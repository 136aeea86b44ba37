from datetime import datetime

import pytest

from budgetsmart.domain.helpers.aggregation import (
    bucket_by_category,
    bucket_by_month,
    build_report,
    compute_budget_overview,
    compute_financial_summary,
    filter_by_transaction_type,
    join_categories,
    with_percentages,
)
from budgetsmart.domain.models import (
    Budget,
    Category,
    CategoryExpenseData,
    Period,
    ReportType,
    Transaction,
    TransactionFilterType,
    TransactionType,
)

JUNE_2024 = Period(month=5, year=2024)


def category(cid, name=None, color=0):
    return Category(id=cid, name=name or cid, icon="", color=color, user_id="u1")


def budget(category_id, amount, month=5, year=2024, bid=None):
    return Budget(
        id=bid or f"b-{category_id}",
        category_id=category_id,
        amount=amount,
        month=month,
        year=year,
        user_id="u1",
    )


def expense(category_id, amount, date=datetime(2024, 6, 10), tid=None):
    return Transaction(
        id=tid or f"t-{category_id}-{amount}",
        amount=amount,
        description="",
        category_id=category_id,
        date=date,
        type=TransactionType.EXPENSE,
        user_id="u1",
    )


def income(category_id, amount, date=datetime(2024, 6, 1)):
    return Transaction(
        id=f"i-{category_id}-{amount}",
        amount=amount,
        description="",
        category_id=category_id,
        date=date,
        type=TransactionType.INCOME,
        user_id="u1",
    )


def test_budget_status_for_food_scenario():
    overview = compute_budget_overview(
        [budget("c1", 100)],
        [category("c1", "Food")],
        [
            expense("c1", 40, datetime(2024, 6, 10)),
            expense("c1", 20, datetime(2024, 6, 15)),
        ],
        JUNE_2024,
    )
    status = overview.statuses[0]
    assert status.spent == 60
    assert status.remaining == 40
    assert status.percentage == pytest.approx(60.0)
    assert status.category.name == "Food"
    assert not status.is_over_budget


def test_no_budgets_gives_empty_overview():
    overview = compute_budget_overview(
        [], [category("c1")], [expense("c1", 50)], JUNE_2024
    )
    assert overview.statuses == []
    assert overview.total_budget == 0
    assert overview.total_spent == 0
    assert overview.total_remaining == 0
    assert overview.percentage == 0


def test_zero_budget_has_zero_percentage():
    overview = compute_budget_overview(
        [budget("c1", 0)], [category("c1")], [expense("c1", 25)], JUNE_2024
    )
    status = overview.statuses[0]
    assert status.percentage == 0
    assert status.remaining == -25
    assert status.is_over_budget
    assert overview.percentage == 0


def test_budgets_of_other_periods_are_ignored():
    overview = compute_budget_overview(
        [budget("c1", 100), budget("c2", 300, month=4)],
        [category("c1"), category("c2")],
        [expense("c1", 10), expense("c2", 10)],
        JUNE_2024,
    )
    assert [s.budget.category_id for s in overview.statuses] == ["c1"]
    assert overview.total_budget == 100


def test_income_does_not_count_as_spent():
    overview = compute_budget_overview(
        [budget("c1", 100)],
        [category("c1")],
        [expense("c1", 30), income("c1", 500)],
        JUNE_2024,
    )
    assert overview.statuses[0].spent == 30


def test_statuses_sorted_by_percentage_descending_and_stable():
    overview = compute_budget_overview(
        [
            budget("low", 100),
            budget("tie-a", 100),
            budget("high", 100),
            budget("tie-b", 200),
        ],
        [category("low"), category("tie-a"), category("high"), category("tie-b")],
        [
            expense("low", 10),
            expense("tie-a", 50),
            expense("high", 90),
            expense("tie-b", 100),
        ],
        JUNE_2024,
    )
    order = [s.budget.category_id for s in overview.statuses]
    assert order == ["high", "tie-a", "tie-b", "low"]


def test_totals_and_overall_percentage():
    overview = compute_budget_overview(
        [budget("c1", 100), budget("c2", 300)],
        [category("c1"), category("c2")],
        [expense("c1", 150), expense("c2", 50)],
        JUNE_2024,
    )
    assert overview.total_budget == 400
    assert overview.total_spent == 200
    assert overview.total_remaining == 200
    assert overview.percentage == pytest.approx(50.0)


def test_budget_with_deleted_category_is_dropped_and_reported():
    overview = compute_budget_overview(
        [budget("c1", 100), budget("gone", 500)],
        [category("c1")],
        [expense("c1", 20), expense("gone", 100)],
        JUNE_2024,
    )
    assert [s.budget.category_id for s in overview.statuses] == ["c1"]
    assert overview.total_budget == 100
    assert overview.total_spent == 20
    assert overview.orphaned_category_ids == ["gone"]


def test_financial_summary_splits_budgeted_expenses():
    summary = compute_financial_summary(
        [
            income("salary", 1000),
            expense("c1", 40),
            expense("c1", 20),
            expense("unbudgeted", 100),
        ],
        [budget("c1", 200), budget("c2", 100, month=1)],
        JUNE_2024,
    )
    assert summary.total_income == 1000
    assert summary.total_expenses == 160
    assert summary.balance == 840
    assert summary.monthly_budget == 200
    assert summary.budgeted_expenses == 60
    assert summary.budget_used_percentage == pytest.approx(30.0)
    assert summary.budgeted_expenses <= summary.total_expenses


def test_financial_summary_without_budgets_or_transactions():
    summary = compute_financial_summary([], [], JUNE_2024)
    assert summary.total_income == 0
    assert summary.total_expenses == 0
    assert summary.balance == 0
    assert summary.monthly_budget == 0
    assert summary.budget_used_percentage == 0
    assert summary.budgeted_expenses == 0


def test_budget_used_percentage_is_zero_without_monthly_budget():
    summary = compute_financial_summary([expense("c1", 75)], [], JUNE_2024)
    assert summary.budget_used_percentage == 0
    assert summary.balance == -75


def test_monthly_buckets_merge_days_and_sort_ascending():
    monthly = bucket_by_month(
        [
            expense("c1", 10, datetime(2024, 6, 2)),
            expense("c1", 5, datetime(2024, 6, 28)),
            expense("c1", 7, datetime(2023, 12, 31)),
            expense("c1", 3, datetime(2024, 1, 1)),
        ]
    )
    assert [(m.year, m.month, m.amount) for m in monthly] == [
        (2023, 11, 7),
        (2024, 0, 3),
        (2024, 5, 15),
    ]
    assert monthly[0].month_name == "Dec"


def test_ghost_category_is_excluded_from_breakdown():
    transactions = [
        expense("c1", 40),
        expense("c2", 25),
        expense("ghost", 15),
    ]
    buckets, orphaned = bucket_by_category(
        transactions, [category("c1", "Food"), category("c2", "Fun")]
    )
    assert "ghost" not in [b.category_id for b in buckets]
    assert orphaned == ["ghost"]
    emitted = sum(b.amount for b in buckets)
    assert emitted == sum(t.amount for t in transactions) - 15


def test_category_buckets_sorted_descending_with_stable_ties():
    buckets, _ = bucket_by_category(
        [
            expense("a", 10),
            expense("b", 30),
            expense("c", 10),
            expense("b", 5),
        ],
        [category("a"), category("b"), category("c", color=7)],
    )
    assert [(b.category_id, b.amount) for b in buckets] == [
        ("b", 35),
        ("a", 10),
        ("c", 10),
    ]
    assert buckets[2].category_color == 7


def test_report_filters_window_and_type_and_slices_top_four():
    categories = [category(c) for c in "abcde"]
    transactions = [
        expense("a", 50, datetime(2024, 3, 1)),
        expense("b", 40, datetime(2024, 4, 1)),
        expense("c", 30, datetime(2024, 5, 1)),
        expense("d", 20, datetime(2024, 6, 1)),
        expense("e", 10, datetime(2024, 6, 10)),
        income("a", 999, datetime(2024, 6, 1)),
        expense("a", 1000, datetime(2024, 2, 28)),
    ]
    report = build_report(
        transactions,
        categories,
        ReportType.EXPENSES,
        datetime(2024, 3, 1),
        datetime(2024, 6, 10),
    )
    assert [c.category_id for c in report.categories] == ["a", "b", "c", "d", "e"]
    assert [c.category_id for c in report.top_categories] == ["a", "b", "c", "d"]
    assert sum(m.amount for m in report.monthly) == 150


def test_report_window_boundaries_are_inclusive():
    start = datetime(2024, 3, 1, 9, 30)
    end = datetime(2024, 6, 1, 9, 30)
    report = build_report(
        [expense("a", 1, start), expense("a", 2, end)],
        [category("a")],
        ReportType.ALL,
        start,
        end,
    )
    assert report.categories[0].amount == 3


def test_income_report_only_counts_income():
    report = build_report(
        [income("a", 100), expense("a", 40)],
        [category("a")],
        ReportType.INCOME,
        datetime(2024, 1, 1),
        datetime(2024, 12, 31),
    )
    assert report.categories[0].amount == 100
    assert report.monthly[0].amount == 100


def test_with_percentages_shares_of_total():
    items = with_percentages(
        [
            CategoryExpenseData("a", "A", 0, 75),
            CategoryExpenseData("b", "B", 0, 25),
        ]
    )
    assert [i.percentage for i in items] == [pytest.approx(75.0), pytest.approx(25.0)]
    assert with_percentages([CategoryExpenseData("a", "A", 0, 0)])[0].percentage == 0


def test_transaction_filters_and_join():
    transactions = [income("a", 10), expense("a", 5), expense("ghost", 1)]
    only_expenses = filter_by_transaction_type(
        transactions, TransactionFilterType.EXPENSE
    )
    assert all(t.type == TransactionType.EXPENSE for t in only_expenses)
    joined = join_categories(transactions, [category("a")])
    assert [j.transaction.amount for j in joined] == [10, 5]
