"""Expense, fixed expense and income endpoints"""

import time
from datetime import date

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from daily_budget.api.dependencies import get_current_user_id, get_repository, get_request_id, get_today
from daily_budget.api.v1.errors import fail
from daily_budget.api.v1.schemas import (
    AddExpenseRequest,
    AddFixedExpenseRequest,
    AddIncomeRequest,
    DailyLogSchema,
    DeleteExpenseResponse,
    DeleteResponse,
    ExpenseResponse,
    ExpenseSchema,
    FixedExpenseSchema,
    IncomeSchema,
)
from daily_budget.domain.repository import BudgetRepository
from daily_budget.infrastructure.database.session import get_db
from daily_budget.infrastructure.observability.logging import log_request_outcome
from daily_budget.services.budget_service import (
    add_expense,
    add_fixed_expense,
    add_income,
    delete_expense,
    delete_fixed_expense,
    delete_income,
)

router = APIRouter()


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    body: AddExpenseRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    """
    Record an expense (defaults to today) and charge it to that day's log.

    daily_log is null when the day has no log yet.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = await add_expense(
            repo,
            user_id,
            body.amount,
            body.description,
            body.category,
            body.date or today,
        )
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "add_expense", (time.time() - start_time) * 1000)
    return ExpenseResponse(
        expense=ExpenseSchema.model_validate(result.expense),
        daily_log=DailyLogSchema.model_validate(result.daily_log) if result.daily_log else None,
    )


@router.delete("/expenses/{expense_id}", response_model=DeleteExpenseResponse)
async def remove_expense(
    expense_id: int,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    """Delete an expense and give its amount back to that day's log"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        log = await delete_expense(repo, user_id, expense_id)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "delete_expense", (time.time() - start_time) * 1000)
    return DeleteExpenseResponse(daily_log=DailyLogSchema.model_validate(log) if log else None)


@router.post("/fixed-expenses", response_model=FixedExpenseSchema, status_code=201)
async def create_fixed_expense(
    body: AddFixedExpenseRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        fixed_expense = await add_fixed_expense(repo, user_id, body.name, body.amount, today=today)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "add_fixed_expense", (time.time() - start_time) * 1000)
    return FixedExpenseSchema.model_validate(fixed_expense)


@router.delete("/fixed-expenses/{fixed_expense_id}", response_model=DeleteResponse)
async def remove_fixed_expense(
    fixed_expense_id: int,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        deleted = await delete_fixed_expense(repo, user_id, fixed_expense_id, today=today)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "delete_fixed_expense", (time.time() - start_time) * 1000)
    return DeleteResponse(deleted=deleted)


@router.post("/incomes", response_model=IncomeSchema, status_code=201)
async def create_income(
    body: AddIncomeRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    """Record income for the period that contains today"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        income = await add_income(repo, user_id, body.amount, body.description, today=today)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "add_income", (time.time() - start_time) * 1000)
    return IncomeSchema.model_validate(income)


@router.delete("/incomes/{income_id}", response_model=DeleteResponse)
async def remove_income(
    income_id: int,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        deleted = await delete_income(repo, user_id, income_id, today=today)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "delete_income", (time.time() - start_time) * 1000)
    return DeleteResponse(deleted=deleted)
