"""Dictionary-backed repository for tests and local experiments"""

from dataclasses import replace
from datetime import date
from itertools import count
from typing import Any, Dict, List, Optional

from daily_budget.config import settings
from daily_budget.domain.exceptions import StorageError
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
from daily_budget.domain.repository import BudgetRepository


class InMemoryBudgetRepository(BudgetRepository):
    """Keeps every table in a dict keyed by primary key"""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.budgets: Dict[int, Budget] = {}
        self.fixed_expenses: Dict[int, FixedExpense] = {}
        self.incomes: Dict[int, Income] = {}
        self.daily_logs: Dict[int, DailyLog] = {}
        self.expenses: Dict[int, Expense] = {}
        self._ids = count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    @staticmethod
    def _update(table: Dict[int, Any], key: int, changes: Dict[str, Any]) -> None:
        if key not in table:
            raise StorageError(f"Row {key} does not exist")
        table[key] = replace(table[key], **changes)

    async def find_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def create_user(
        self,
        email: str,
        role: str = "user",
        currency: Optional[str] = None,
        month_start_day: int = 1,
    ) -> User:
        user = User(
            id=self._next_id(),
            email=email,
            role=role,
            currency=currency or settings.default_currency,
            month_start_day=month_start_day,
        )
        self.users[user.id] = user
        return user

    async def update_user(self, user_id: int, **changes: Any) -> None:
        self._update(self.users, user_id, changes)

    async def find_budget(self, user_id: int, month: int, year: int) -> Optional[Budget]:
        for budget in self.budgets.values():
            if (budget.user_id, budget.month, budget.year) == (user_id, month, year):
                return budget
        return None

    async def create_budget(
        self,
        user_id: int,
        monthly_amount: Amount,
        month: int,
        year: int,
        start_day: Optional[int],
    ) -> Budget:
        if await self.find_budget(user_id, month, year) is not None:
            raise StorageError(f"Budget for {month}/{year} already exists")
        budget = Budget(
            id=self._next_id(),
            user_id=user_id,
            monthly_amount=monthly_amount,
            month=month,
            year=year,
            start_day=start_day,
        )
        self.budgets[budget.id] = budget
        return budget

    async def update_budget(self, budget_id: int, **changes: Any) -> None:
        self._update(self.budgets, budget_id, changes)

    async def find_fixed_expenses(self, user_id: int) -> List[FixedExpense]:
        return [f for f in self.fixed_expenses.values() if f.user_id == user_id]

    async def create_fixed_expense(self, user_id: int, name: str, amount: Amount) -> FixedExpense:
        fixed_expense = FixedExpense(id=self._next_id(), user_id=user_id, name=name, amount=amount)
        self.fixed_expenses[fixed_expense.id] = fixed_expense
        return fixed_expense

    async def delete_fixed_expense(self, user_id: int, fixed_expense_id: int) -> bool:
        fixed_expense = self.fixed_expenses.get(fixed_expense_id)
        if fixed_expense is None or fixed_expense.user_id != user_id:
            return False
        del self.fixed_expenses[fixed_expense_id]
        return True

    async def find_incomes(self, user_id: int, month: int, year: int) -> List[Income]:
        return [
            i for i in self.incomes.values()
            if (i.user_id, i.month, i.year) == (user_id, month, year)
        ]

    async def create_income(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        month: int,
        year: int,
    ) -> Income:
        income = Income(
            id=self._next_id(),
            user_id=user_id,
            amount=amount,
            description=description,
            month=month,
            year=year,
        )
        self.incomes[income.id] = income
        return income

    async def delete_income(self, user_id: int, income_id: int) -> bool:
        income = self.incomes.get(income_id)
        if income is None or income.user_id != user_id:
            return False
        del self.incomes[income_id]
        return True

    async def find_daily_log(self, user_id: int, day: date) -> Optional[DailyLog]:
        for log in self.daily_logs.values():
            if log.user_id == user_id and log.date == day:
                return log
        return None

    async def find_daily_logs_between(self, user_id: int, start: date, end: date) -> List[DailyLog]:
        logs = [
            log for log in self.daily_logs.values()
            if log.user_id == user_id and start <= log.date <= end
        ]
        return sorted(logs, key=lambda log: log.date, reverse=True)

    async def create_daily_log(
        self,
        user_id: int,
        day: date,
        daily_budget: Amount,
        carryover: SignedAmount,
        total_spent: Amount,
        remaining: SignedAmount,
    ) -> DailyLog:
        # Mirrors the (user_id, date) unique constraint of the SQL schema
        if await self.find_daily_log(user_id, day) is not None:
            raise StorageError(f"Daily log for {day.isoformat()} already exists")
        log = DailyLog(
            id=self._next_id(),
            user_id=user_id,
            date=day,
            daily_budget=daily_budget,
            carryover=carryover,
            total_spent=total_spent,
            remaining=remaining,
        )
        self.daily_logs[log.id] = log
        return log

    async def update_daily_log(self, log_id: int, **changes: Any) -> None:
        self._update(self.daily_logs, log_id, changes)

    async def find_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        expense = self.expenses.get(expense_id)
        if expense is None or expense.user_id != user_id:
            return None
        return expense

    async def find_expenses(self, user_id: int, day: date) -> List[Expense]:
        return await self.find_expenses_between(user_id, day, day)

    async def find_expenses_between(self, user_id: int, start: date, end: date) -> List[Expense]:
        expenses = [
            e for e in self.expenses.values()
            if e.user_id == user_id and start <= e.date <= end
        ]
        return sorted(expenses, key=lambda e: (e.date, e.id), reverse=True)

    async def create_expense(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        category: ExpenseCategory,
        day: date,
    ) -> Expense:
        expense = Expense(
            id=self._next_id(),
            user_id=user_id,
            amount=amount,
            description=description,
            category=category,
            date=day,
        )
        self.expenses[expense.id] = expense
        return expense

    async def delete_expense(self, expense_id: int) -> None:
        self.expenses.pop(expense_id, None)
