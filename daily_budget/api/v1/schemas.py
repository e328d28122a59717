"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from daily_budget.domain.models import ExpenseCategory

# Inputs are validated here; the core assumes well-formed values
MonthField = Field(..., ge=1, le=12, description="Label month (1-12)")
YearField = Field(..., ge=2020, le=2100, description="Label year")


class SetBudgetRequest(BaseModel):
    """Request body for PUT /v1/budget"""

    monthly_amount: Decimal = Field(..., gt=0)
    month: int = MonthField
    year: int = YearField
    start_day: Optional[int] = Field(None, ge=1, le=28, description="Override of the user's start day")


class AddExpenseRequest(BaseModel):
    """Request body for POST /v1/expenses"""

    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: Optional[dt.date] = None


class AddFixedExpenseRequest(BaseModel):
    """Request body for POST /v1/fixed-expenses"""

    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)


class AddIncomeRequest(BaseModel):
    """Request body for POST /v1/incomes"""

    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None


class UpdateSettingsRequest(BaseModel):
    """Request body for PATCH /v1/settings"""

    month_start_day: Optional[int] = Field(None, ge=1, le=28)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class RecordSchema(BaseModel):
    """Base for responses built from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class UserSchema(RecordSchema):
    id: int
    email: str
    role: str
    currency: str
    month_start_day: int


class BudgetSchema(RecordSchema):
    id: int
    monthly_amount: Decimal
    month: int
    year: int
    start_day: Optional[int] = None


class FixedExpenseSchema(RecordSchema):
    id: int
    name: str
    amount: Decimal


class IncomeSchema(RecordSchema):
    id: int
    amount: Decimal
    description: Optional[str] = None
    month: int
    year: int


class ExpenseSchema(RecordSchema):
    id: int
    amount: Decimal
    description: Optional[str] = None
    category: ExpenseCategory
    date: dt.date


class DailyLogSchema(RecordSchema):
    id: int
    date: dt.date
    daily_budget: Decimal
    carryover: Decimal
    total_spent: Decimal
    remaining: Decimal


class PeriodSchema(RecordSchema):
    month: int
    year: int
    start_date: dt.date
    end_date: dt.date
    days_in_period: int


class PeriodResponse(BaseModel):
    """Response for GET /v1/periods/{year}/{month} and /v1/periods/current"""

    period: PeriodSchema
    display: str
    previous: PeriodSchema
    next: PeriodSchema


class ExpenseResponse(BaseModel):
    """Response for POST /v1/expenses"""

    expense: ExpenseSchema
    daily_log: Optional[DailyLogSchema] = None


class DeleteExpenseResponse(BaseModel):
    """Response for DELETE /v1/expenses/{id}"""

    daily_log: Optional[DailyLogSchema] = None


class DeleteResponse(BaseModel):
    deleted: bool


class DashboardResponse(RecordSchema):
    """Response for GET /v1/dashboard"""

    user: UserSchema
    budget: Optional[BudgetSchema] = None
    budget_copied_from_previous: bool
    period: PeriodSchema
    display: str
    effective_start_day: int
    user_start_day: int
    is_current_period: bool
    today: dt.date
    daily_budget: Decimal
    available_for_period: Decimal
    total_fixed_expenses: Decimal
    total_incomes: Decimal
    fixed_expenses: List[FixedExpenseSchema]
    incomes: List[IncomeSchema]
    today_log: Optional[DailyLogSchema] = None
    today_spent_percent: Optional[Decimal] = None
    today_overspent: bool = False
    today_expenses: List[ExpenseSchema]
    period_logs: List[DailyLogSchema]
    period_expenses: List[ExpenseSchema]
