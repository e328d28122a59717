"""SQLAlchemy ORM models for budget storage"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from daily_budget.config import settings

Base = declarative_base()

# Daily allowances are fractional (1200 / 31), keep extra scale
Money = Numeric(14, 4, asdecimal=True)


class UserRow(Base):
    """Budget owner with display preferences"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    role = Column(Text, nullable=False, default="user")
    currency = Column(Text, nullable=False, default=lambda: settings.default_currency)
    month_start_day = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BudgetRow(Base):
    """Monthly budget per labelled period"""

    __tablename__ = "budgets"
    __table_args__ = (UniqueConstraint("user_id", "month", "year", name="uq_budget_user_period"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    monthly_amount = Column(Money, nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    start_day = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FixedExpenseRow(Base):
    """Recurring monthly deduction"""

    __tablename__ = "fixed_expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Money, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class IncomeRow(Base):
    """Extra income for one labelled period"""

    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    description = Column(Text, nullable=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DailyLogRow(Base):
    """Per-day ledger, one row per user and date"""

    __tablename__ = "daily_logs"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_log_user_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    daily_budget = Column(Money, nullable=False)
    carryover = Column(Money, nullable=False, default=0)
    total_spent = Column(Money, nullable=False, default=0)
    remaining = Column(Money, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRow(Base):
    """Individual spending record"""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(Text, nullable=False, default="other")
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
