# budgetsmart/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

MIN_YEAR = 1
MAX_YEAR = 9999

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


class TransactionType(Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionFilterType(Enum):
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


class ReportType(Enum):
    EXPENSES = "expenses"
    INCOME = "income"
    ALL = "all"


class TimePeriod(Enum):
    LAST_MONTH = "last_month"
    LAST_3_MONTHS = "last_3_months"
    LAST_6_MONTHS = "last_6_months"
    LAST_YEAR = "last_year"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Period:
    """A calendar month; ``month`` is 0-based (0 = January)."""

    month: int
    year: int

    def __post_init__(self):
        if not 0 <= self.month <= 11:
            raise ValueError(f"Month must be between 0 and 11, got {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(
                f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {self.year}"
            )

    @classmethod
    def current(cls, now: Optional[datetime] = None) -> "Period":
        now = now or datetime.now()
        return cls(month=now.month - 1, year=now.year)

    @classmethod
    def of(cls, moment: datetime) -> "Period":
        return cls(month=moment.month - 1, year=moment.year)


@dataclass
class User:
    id: str
    default_currency: str = "USD"
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Category:
    id: str
    name: str
    icon: str = ""
    color: int = 0
    user_id: str = ""


@dataclass
class Transaction:
    id: str
    amount: float
    description: str
    category_id: str
    date: datetime
    type: TransactionType = TransactionType.EXPENSE
    user_id: str = ""


@dataclass
class Budget:
    id: str
    category_id: str
    amount: float
    month: int
    year: int
    user_id: str = ""

    @property
    def period(self) -> Period:
        return Period(month=self.month, year=self.year)


@dataclass
class TransactionWithCategory:
    transaction: Transaction
    category: Category


# --- Derived views ---


@dataclass
class BudgetStatus:
    budget: Budget
    category: Category
    spent: float
    remaining: float
    percentage: float

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.budget.amount


@dataclass
class BudgetOverview:
    period: Period
    statuses: List[BudgetStatus] = field(default_factory=list)
    total_budget: float = 0.0
    total_spent: float = 0.0
    total_remaining: float = 0.0
    percentage: float = 0.0
    orphaned_category_ids: List[str] = field(default_factory=list)


@dataclass
class FinancialSummary:
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    monthly_budget: float = 0.0
    budget_used_percentage: float = 0.0
    budgeted_expenses: float = 0.0


@dataclass
class CategoryExpenseData:
    category_id: str
    category_name: str
    category_color: int
    amount: float
    percentage: float = 0.0


@dataclass
class MonthlyExpenseData:
    year: int
    month: int
    amount: float

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month][:3]


@dataclass
class ReportData:
    report_type: ReportType
    start_date: datetime
    end_date: datetime
    monthly: List[MonthlyExpenseData] = field(default_factory=list)
    categories: List[CategoryExpenseData] = field(default_factory=list)
    top_categories: List[CategoryExpenseData] = field(default_factory=list)
    orphaned_category_ids: List[str] = field(default_factory=list)
