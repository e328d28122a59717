"""
Abstract storage interface for budget data.

The orchestration layer depends on this interface only, so the SQLAlchemy
implementation can be swapped for the in-memory one in tests. Every method
is scoped by user id and/or primary key and returns plain domain records or
None. Implementations raise StorageError on persistence failures.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, List, Optional

from daily_budget.domain.models import (
    Amount,
    Budget,
    DailyLog,
    Expense,
    ExpenseCategory,
    FixedExpense,
    Income,
    SignedAmount,
    User,
)


class BudgetRepository(ABC):
    """Capability set the budget service needs from storage"""

    # Users

    @abstractmethod
    async def find_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def create_user(
        self,
        email: str,
        role: str = "user",
        currency: Optional[str] = None,
        month_start_day: int = 1,
    ) -> User:
        """currency falls back to settings.default_currency"""
        pass

    @abstractmethod
    async def update_user(self, user_id: int, **changes: Any) -> None:
        """Apply field changes (month_start_day, currency) to a user"""
        pass

    # Budgets

    @abstractmethod
    async def find_budget(self, user_id: int, month: int, year: int) -> Optional[Budget]:
        pass

    @abstractmethod
    async def create_budget(
        self,
        user_id: int,
        monthly_amount: Amount,
        month: int,
        year: int,
        start_day: Optional[int],
    ) -> Budget:
        pass

    @abstractmethod
    async def update_budget(self, budget_id: int, **changes: Any) -> None:
        pass

    # Fixed expenses

    @abstractmethod
    async def find_fixed_expenses(self, user_id: int) -> List[FixedExpense]:
        pass

    @abstractmethod
    async def create_fixed_expense(self, user_id: int, name: str, amount: Amount) -> FixedExpense:
        pass

    @abstractmethod
    async def delete_fixed_expense(self, user_id: int, fixed_expense_id: int) -> bool:
        """Returns True when a row owned by the user was removed"""
        pass

    # Incomes

    @abstractmethod
    async def find_incomes(self, user_id: int, month: int, year: int) -> List[Income]:
        pass

    @abstractmethod
    async def create_income(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        month: int,
        year: int,
    ) -> Income:
        pass

    @abstractmethod
    async def delete_income(self, user_id: int, income_id: int) -> bool:
        pass

    # Daily logs

    @abstractmethod
    async def find_daily_log(self, user_id: int, day: date) -> Optional[DailyLog]:
        pass

    @abstractmethod
    async def find_daily_logs_between(self, user_id: int, start: date, end: date) -> List[DailyLog]:
        """Logs with start <= date <= end, newest first"""
        pass

    @abstractmethod
    async def create_daily_log(
        self,
        user_id: int,
        day: date,
        daily_budget: Amount,
        carryover: SignedAmount,
        total_spent: Amount,
        remaining: SignedAmount,
    ) -> DailyLog:
        pass

    @abstractmethod
    async def update_daily_log(self, log_id: int, **changes: Any) -> None:
        pass

    # Expenses

    @abstractmethod
    async def find_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        pass

    @abstractmethod
    async def find_expenses(self, user_id: int, day: date) -> List[Expense]:
        pass

    @abstractmethod
    async def find_expenses_between(self, user_id: int, start: date, end: date) -> List[Expense]:
        """Expenses with start <= date <= end, newest first"""
        pass

    @abstractmethod
    async def create_expense(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        category: ExpenseCategory,
        day: date,
    ) -> Expense:
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: int) -> None:
        pass
