"""Data access layer for budget entities"""

import functools
import logging
from datetime import date
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

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
from daily_budget.infrastructure.database.models import (
    BudgetRow,
    DailyLogRow,
    ExpenseRow,
    FixedExpenseRow,
    IncomeRow,
    UserRow,
)

logger = logging.getLogger(__name__)


def storage_errors(method):
    """Re-raise SQLAlchemy failures as StorageError"""

    @functools.wraps(method)
    async def wrapper(*args, **kwargs):
        try:
            return await method(*args, **kwargs)
        except SQLAlchemyError as e:
            raise StorageError(f"{method.__name__} failed: {e}") from e

    return wrapper


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        role=row.role,
        currency=row.currency,
        month_start_day=row.month_start_day,
    )


def _to_budget(row: BudgetRow) -> Budget:
    return Budget(
        id=row.id,
        user_id=row.user_id,
        monthly_amount=row.monthly_amount,
        month=row.month,
        year=row.year,
        start_day=row.start_day,
    )


def _to_fixed_expense(row: FixedExpenseRow) -> FixedExpense:
    return FixedExpense(id=row.id, user_id=row.user_id, name=row.name, amount=row.amount)


def _to_income(row: IncomeRow) -> Income:
    return Income(
        id=row.id,
        user_id=row.user_id,
        amount=row.amount,
        description=row.description,
        month=row.month,
        year=row.year,
    )


def _to_daily_log(row: DailyLogRow) -> DailyLog:
    return DailyLog(
        id=row.id,
        user_id=row.user_id,
        date=row.date,
        daily_budget=row.daily_budget,
        carryover=row.carryover,
        total_spent=row.total_spent,
        remaining=row.remaining,
    )


def _to_expense(row: ExpenseRow) -> Expense:
    return Expense(
        id=row.id,
        user_id=row.user_id,
        amount=row.amount,
        description=row.description,
        category=ExpenseCategory(row.category or ExpenseCategory.OTHER.value),
        date=row.date,
    )


class SqlBudgetRepository(BudgetRepository):
    """
    BudgetRepository over a SQLAlchemy session.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def _apply(self, model, key: int, changes: dict) -> None:
        row = self.db.get(model, key)
        if row is None:
            raise StorageError(f"{model.__tablename__} row {key} does not exist")
        for name, value in changes.items():
            setattr(row, name, value)
        self.db.flush()

    # Users

    @storage_errors
    async def find_user(self, user_id: int) -> Optional[User]:
        row = self.db.get(UserRow, user_id)
        return _to_user(row) if row else None

    @storage_errors
    async def create_user(
        self,
        email: str,
        role: str = "user",
        currency: Optional[str] = None,
        month_start_day: int = 1,
    ) -> User:
        row = UserRow(
            email=email,
            role=role,
            currency=currency or settings.default_currency,
            month_start_day=month_start_day,
        )
        self.db.add(row)
        self.db.flush()
        return _to_user(row)

    @storage_errors
    async def update_user(self, user_id: int, **changes: Any) -> None:
        self._apply(UserRow, user_id, changes)

    # Budgets

    @storage_errors
    async def find_budget(self, user_id: int, month: int, year: int) -> Optional[Budget]:
        row = (
            self.db.query(BudgetRow)
            .filter(BudgetRow.user_id == user_id, BudgetRow.month == month, BudgetRow.year == year)
            .first()
        )
        return _to_budget(row) if row else None

    @storage_errors
    async def create_budget(
        self,
        user_id: int,
        monthly_amount: Amount,
        month: int,
        year: int,
        start_day: Optional[int],
    ) -> Budget:
        row = BudgetRow(
            user_id=user_id,
            monthly_amount=monthly_amount,
            month=month,
            year=year,
            start_day=start_day,
        )
        self.db.add(row)
        self.db.flush()
        return _to_budget(row)

    @storage_errors
    async def update_budget(self, budget_id: int, **changes: Any) -> None:
        self._apply(BudgetRow, budget_id, changes)

    # Fixed expenses

    @storage_errors
    async def find_fixed_expenses(self, user_id: int) -> List[FixedExpense]:
        rows = (
            self.db.query(FixedExpenseRow)
            .filter(FixedExpenseRow.user_id == user_id)
            .order_by(FixedExpenseRow.id.desc())
            .all()
        )
        return [_to_fixed_expense(row) for row in rows]

    @storage_errors
    async def create_fixed_expense(self, user_id: int, name: str, amount: Amount) -> FixedExpense:
        row = FixedExpenseRow(user_id=user_id, name=name, amount=amount)
        self.db.add(row)
        self.db.flush()
        return _to_fixed_expense(row)

    @storage_errors
    async def delete_fixed_expense(self, user_id: int, fixed_expense_id: int) -> bool:
        deleted = (
            self.db.query(FixedExpenseRow)
            .filter(FixedExpenseRow.id == fixed_expense_id, FixedExpenseRow.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    # Incomes

    @storage_errors
    async def find_incomes(self, user_id: int, month: int, year: int) -> List[Income]:
        rows = (
            self.db.query(IncomeRow)
            .filter(IncomeRow.user_id == user_id, IncomeRow.month == month, IncomeRow.year == year)
            .order_by(IncomeRow.id.desc())
            .all()
        )
        return [_to_income(row) for row in rows]

    @storage_errors
    async def create_income(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        month: int,
        year: int,
    ) -> Income:
        row = IncomeRow(user_id=user_id, amount=amount, description=description, month=month, year=year)
        self.db.add(row)
        self.db.flush()
        return _to_income(row)

    @storage_errors
    async def delete_income(self, user_id: int, income_id: int) -> bool:
        deleted = (
            self.db.query(IncomeRow)
            .filter(IncomeRow.id == income_id, IncomeRow.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    # Daily logs

    def _daily_log_row(self, user_id: int, day: date) -> Optional[DailyLogRow]:
        return (
            self.db.query(DailyLogRow)
            .filter(DailyLogRow.user_id == user_id, DailyLogRow.date == day)
            .first()
        )

    @storage_errors
    async def find_daily_log(self, user_id: int, day: date) -> Optional[DailyLog]:
        row = self._daily_log_row(user_id, day)
        return _to_daily_log(row) if row else None

    @storage_errors
    async def find_daily_logs_between(self, user_id: int, start: date, end: date) -> List[DailyLog]:
        rows = (
            self.db.query(DailyLogRow)
            .filter(DailyLogRow.user_id == user_id, DailyLogRow.date >= start, DailyLogRow.date <= end)
            .order_by(DailyLogRow.date.desc())
            .all()
        )
        return [_to_daily_log(row) for row in rows]

    @storage_errors
    async def create_daily_log(
        self,
        user_id: int,
        day: date,
        daily_budget: Amount,
        carryover: SignedAmount,
        total_spent: Amount,
        remaining: SignedAmount,
    ) -> DailyLog:
        """
        Insert today's log.

        A concurrent request may have created the same (user_id, date) row
        first; the unique constraint then fails and the insert is retried as
        an update of that row.
        """
        values = dict(
            daily_budget=daily_budget,
            carryover=carryover,
            total_spent=total_spent,
            remaining=remaining,
        )
        try:
            with self.db.begin_nested():
                row = DailyLogRow(user_id=user_id, date=day, **values)
                self.db.add(row)
        except IntegrityError:
            row = self._daily_log_row(user_id, day)
            if row is None:
                raise
            logger.warning(
                "Daily log already existed, updating instead",
                extra={"user_id": user_id, "date": day.isoformat()},
            )
            # Spending recorded by the other writer stays on the row
            row.daily_budget = daily_budget
            row.remaining = daily_budget + row.carryover - row.total_spent
            self.db.flush()
        return _to_daily_log(row)

    @storage_errors
    async def update_daily_log(self, log_id: int, **changes: Any) -> None:
        self._apply(DailyLogRow, log_id, changes)

    # Expenses

    @storage_errors
    async def find_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        row = (
            self.db.query(ExpenseRow)
            .filter(ExpenseRow.id == expense_id, ExpenseRow.user_id == user_id)
            .first()
        )
        return _to_expense(row) if row else None

    @storage_errors
    async def find_expenses(self, user_id: int, day: date) -> List[Expense]:
        return await self.find_expenses_between(user_id, day, day)

    @storage_errors
    async def find_expenses_between(self, user_id: int, start: date, end: date) -> List[Expense]:
        rows = (
            self.db.query(ExpenseRow)
            .filter(ExpenseRow.user_id == user_id, ExpenseRow.date >= start, ExpenseRow.date <= end)
            .order_by(ExpenseRow.date.desc(), ExpenseRow.id.desc())
            .all()
        )
        return [_to_expense(row) for row in rows]

    @storage_errors
    async def create_expense(
        self,
        user_id: int,
        amount: Amount,
        description: Optional[str],
        category: ExpenseCategory,
        day: date,
    ) -> Expense:
        row = ExpenseRow(
            user_id=user_id,
            amount=amount,
            description=description,
            category=ExpenseCategory(category).value,
            date=day,
        )
        self.db.add(row)
        self.db.flush()
        return _to_expense(row)

    @storage_errors
    async def delete_expense(self, expense_id: int) -> None:
        self.db.query(ExpenseRow).filter(ExpenseRow.id == expense_id).delete(synchronize_session=False)
