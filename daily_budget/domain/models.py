"""Domain models - pure Python dataclasses representing budget entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, NewType, Optional

# Non-negative money (amounts, daily budget, total spent)
Amount = NewType("Amount", Decimal)

# Money that may go negative (carryover, remaining)
SignedAmount = NewType("SignedAmount", Decimal)


class ExpenseCategory(str, Enum):
    """Spending categories shown on the dashboard"""

    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    BILLS = "bills"
    HEALTH = "health"
    OTHER = "other"


@dataclass(frozen=True)
class PeriodLabel:
    """The (month, year) label that identifies a budget period"""

    month: int
    year: int


@dataclass(frozen=True)
class BudgetPeriod:
    """
    Derived date span for a labelled budget period.

    start_date and end_date are inclusive. With a custom start day the span
    may begin in a different calendar month than the label suggests.
    """

    month: int
    year: int
    start_date: date
    end_date: date
    days_in_period: int


@dataclass
class User:
    """Budget owner"""

    id: int
    email: str
    currency: str
    role: str = "user"
    month_start_day: int = 1


@dataclass
class Budget:
    """Monthly budget for one labelled period"""

    id: int
    user_id: int
    monthly_amount: Amount
    month: int
    year: int
    start_day: Optional[int] = None  # None = use the user's default


@dataclass
class FixedExpense:
    """Recurring deduction applied to every period"""

    id: int
    user_id: int
    name: str
    amount: Amount


@dataclass
class Income:
    """Extra income scoped to one labelled period"""

    id: int
    user_id: int
    amount: Amount
    description: Optional[str]
    month: int
    year: int


@dataclass
class Expense:
    """Single spending record"""

    id: int
    user_id: int
    amount: Amount
    description: Optional[str]
    category: ExpenseCategory
    date: date


@dataclass
class DailyLog:
    """
    Per-day ledger row.

    remaining == daily_budget + carryover - total_spent after every mutation.
    """

    id: int
    user_id: int
    date: date
    daily_budget: Amount
    carryover: SignedAmount
    total_spent: Amount
    remaining: SignedAmount


@dataclass
class DashboardSnapshot:
    """Read model returned by get_dashboard_data"""

    user: User
    budget: Optional[Budget]
    period: BudgetPeriod
    effective_start_day: int
    user_start_day: int
    daily_budget: Amount
    total_fixed_expenses: Amount
    total_incomes: Amount
    available_for_period: SignedAmount
    today: date
    is_current_period: bool
    budget_copied_from_previous: bool = False
    display: str = ""
    fixed_expenses: List[FixedExpense] = field(default_factory=list)
    incomes: List[Income] = field(default_factory=list)
    today_log: Optional[DailyLog] = None
    # Share of today's daily_budget + carryover already spent, capped at 150
    today_spent_percent: Optional[Decimal] = None
    today_overspent: bool = False
    today_expenses: List[Expense] = field(default_factory=list)
    period_logs: List[DailyLog] = field(default_factory=list)
    period_expenses: List[Expense] = field(default_factory=list)


@dataclass
class ExpenseResult:
    """Outcome of add_expense: the stored expense and the ledger row it touched"""

    expense: Expense
    daily_log: Optional[DailyLog]
