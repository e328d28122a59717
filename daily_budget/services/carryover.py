"""Carryover engine - rolls unspent or overspent money from day to day"""

import logging
from dataclasses import replace
from datetime import date

from daily_budget.domain.allowance import ZERO, Number, calculate_daily_budget, calculate_remaining
from daily_budget.domain.models import Amount, DailyLog, SignedAmount
from daily_budget.domain.periods import are_dates_in_same_period, get_budget_period, get_yesterday
from daily_budget.domain.repository import BudgetRepository
from daily_budget.infrastructure.observability.metrics import record_daily_log

logger = logging.getLogger(__name__)


async def initialize_or_refresh_daily_log(
    repo: BudgetRepository,
    user_id: int,
    monthly_amount: Number,
    total_fixed_expenses: Number,
    total_incomes: Number,
    month: int,
    year: int,
    start_day: int,
    today: date,
) -> DailyLog:
    """
    Create today's ledger row, or refresh it if it already exists.

    New row: carryover is yesterday's remaining when yesterday falls in the
    same budget period (0 if yesterday has no log), otherwise 0.

    Existing row: only daily_budget and remaining change. carryover and
    total_spent already reflect the day's history and are kept.
    """
    period = get_budget_period(month, year, start_day)
    daily_budget = calculate_daily_budget(
        monthly_amount,
        total_incomes,
        total_fixed_expenses,
        period.days_in_period,
    )

    existing = await repo.find_daily_log(user_id, today)

    if existing is None:
        yesterday = get_yesterday(today)
        carryover = SignedAmount(ZERO)

        # Period boundary resets the ledger
        if are_dates_in_same_period(yesterday, today, start_day):
            yesterday_log = await repo.find_daily_log(user_id, yesterday)
            if yesterday_log is not None:
                carryover = yesterday_log.remaining

        log = await repo.create_daily_log(
            user_id=user_id,
            day=today,
            daily_budget=daily_budget,
            carryover=carryover,
            total_spent=Amount(ZERO),
            remaining=calculate_remaining(daily_budget, carryover, ZERO),
        )
        record_daily_log("created")
        logger.info(
            "Daily log created",
            extra={
                "user_id": user_id,
                "date": today.isoformat(),
                "daily_budget": str(daily_budget),
                "carryover": str(carryover),
            },
        )
        return log

    remaining = calculate_remaining(daily_budget, existing.carryover, existing.total_spent)
    await repo.update_daily_log(existing.id, daily_budget=daily_budget, remaining=remaining)
    record_daily_log("refreshed")
    logger.info(
        "Daily log refreshed",
        extra={
            "user_id": user_id,
            "date": today.isoformat(),
            "daily_budget": str(daily_budget),
            "remaining": str(remaining),
        },
    )
    return replace(existing, daily_budget=daily_budget, remaining=remaining)
