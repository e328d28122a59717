"""Budget, dashboard, settings and period endpoints"""

import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.orm import Session

from daily_budget.api.dependencies import get_current_user_id, get_repository, get_request_id, get_today
from daily_budget.api.v1.errors import fail
from daily_budget.api.v1.schemas import (
    BudgetSchema,
    DashboardResponse,
    PeriodResponse,
    PeriodSchema,
    SetBudgetRequest,
    UpdateSettingsRequest,
    UserSchema,
)
from daily_budget.config import settings
from daily_budget.domain.periods import (
    format_period_display,
    get_budget_period,
    get_current_budget_period,
    get_next_period,
    get_previous_period,
)
from daily_budget.domain.repository import BudgetRepository
from daily_budget.infrastructure.database.session import get_db
from daily_budget.infrastructure.observability.logging import log_request_outcome
from daily_budget.services.budget_service import get_dashboard_data, set_budget, update_settings

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def read_dashboard(
    request: Request,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020, le=2100),
    locale: str = Query(settings.default_locale),
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    """
    Dashboard snapshot for a labelled period (defaults to the current one).

    Viewing the current period may copy last period's budget and create
    today's daily log, so the request commits.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = await get_dashboard_data(repo, user_id, month, year, today=today, locale=locale)
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "dashboard", (time.time() - start_time) * 1000)
    return DashboardResponse.model_validate(snapshot)


@router.put("/budget", response_model=BudgetSchema)
async def put_budget(
    body: SetBudgetRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    """Create or update a period budget and refresh today's allowance"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        budget = await set_budget(
            repo,
            user_id,
            body.monthly_amount,
            body.month,
            body.year,
            start_day_override=body.start_day,
            today=today,
        )
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "set_budget", (time.time() - start_time) * 1000)
    return BudgetSchema.model_validate(budget)


@router.patch("/settings", response_model=UserSchema)
async def patch_settings(
    body: UpdateSettingsRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    repo: BudgetRepository = Depends(get_repository),
):
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        user = await update_settings(
            repo,
            user_id,
            month_start_day=body.month_start_day,
            currency=body.currency,
        )
        db.commit()
    except Exception as e:
        raise fail(db, e, request_id) from e

    log_request_outcome(request_id, user_id, "update_settings", (time.time() - start_time) * 1000)
    return UserSchema.model_validate(user)


@router.get("/periods/{year}/{month}", response_model=PeriodResponse)
def read_period(
    year: int = Path(..., ge=2020, le=2100),
    month: int = Path(..., ge=1, le=12),
    start_day: int = Query(1, ge=1, le=28),
    locale: str = Query(settings.default_locale),
):
    """Date span of a labelled period plus its neighbours"""
    period = get_budget_period(month, year, start_day)
    return PeriodResponse(
        period=PeriodSchema.model_validate(period),
        display=format_period_display(period, start_day, locale),
        previous=PeriodSchema.model_validate(get_previous_period(month, year, start_day)),
        next=PeriodSchema.model_validate(get_next_period(month, year, start_day)),
    )


@router.get("/periods/current", response_model=PeriodResponse)
def read_current_period(
    start_day: int = Query(1, ge=1, le=28),
    locale: str = Query(settings.default_locale),
    today: date = Depends(get_today),
):
    """Period containing today for the given start day"""
    period = get_current_budget_period(today, start_day)
    return PeriodResponse(
        period=PeriodSchema.model_validate(period),
        display=format_period_display(period, start_day, locale),
        previous=PeriodSchema.model_validate(get_previous_period(period.month, period.year, start_day)),
        next=PeriodSchema.model_validate(get_next_period(period.month, period.year, start_day)),
    )
