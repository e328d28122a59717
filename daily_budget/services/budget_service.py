"""
Budget orchestration - ties period math and the carryover engine to storage.

Every operation is scoped to a caller-supplied user id and receives "today"
explicitly, so results never depend on the wall clock inside the core.
Storage errors propagate unchanged; nothing here retries.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from daily_budget.config import settings
from daily_budget.domain.allowance import (
    ZERO,
    Number,
    calculate_available_for_period,
    calculate_daily_budget,
    calculate_remaining,
    calculate_spending_percentage,
    sum_amounts,
    to_decimal,
)
from daily_budget.domain.exceptions import ExpenseNotFoundError, UserNotFoundError
from daily_budget.domain.models import (
    Amount,
    Budget,
    DailyLog,
    DashboardSnapshot,
    ExpenseCategory,
    ExpenseResult,
    FixedExpense,
    Income,
    User,
)
from daily_budget.domain.periods import (
    format_period_display,
    get_budget_period,
    get_period_for_date,
    get_previous_month,
    is_current_period,
)
from daily_budget.domain.repository import BudgetRepository
from daily_budget.infrastructure.observability.metrics import (
    budget_copy_counter,
    expense_reversal_counter,
    ledger_skip_counter,
    record_expense,
)
from daily_budget.services.carryover import initialize_or_refresh_daily_log

logger = logging.getLogger(__name__)


def resolve_start_day(budget_start_day: Optional[int], user_start_day: Optional[int]) -> int:
    """Budget override wins, then the user's default, then the calendar month"""
    if budget_start_day is not None:
        return budget_start_day
    return user_start_day or 1


async def _require_user(repo: BudgetRepository, user_id: int) -> User:
    user = await repo.find_user(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def _period_totals(repo: BudgetRepository, user_id: int, month: int, year: int):
    """Fixed expenses (all periods) and incomes for one label, with their sums"""
    fixed_expenses = await repo.find_fixed_expenses(user_id)
    incomes = await repo.find_incomes(user_id, month, year)
    return fixed_expenses, incomes, sum_amounts(fixed_expenses), sum_amounts(incomes)


async def set_budget(
    repo: BudgetRepository,
    user_id: int,
    monthly_amount: Number,
    month: int,
    year: int,
    start_day_override: Optional[int] = None,
    today: Optional[date] = None,
) -> Budget:
    """
    Create or update the budget for (month, year), then refresh today's log.

    The daily log is recomputed with the effective start day
    (override, else the user's default, else 1).

    Raises:
        UserNotFoundError: user_id has no user record
    """
    today = today or date.today()
    monthly_amount = Amount(to_decimal(monthly_amount))

    user = await _require_user(repo, user_id)
    user_start_day = user.month_start_day or 1

    existing = await repo.find_budget(user_id, month, year)
    if existing is not None:
        await repo.update_budget(existing.id, monthly_amount=monthly_amount, start_day=start_day_override)
        budget = replace(existing, monthly_amount=monthly_amount, start_day=start_day_override)
    else:
        budget = await repo.create_budget(
            user_id=user_id,
            monthly_amount=monthly_amount,
            month=month,
            year=year,
            start_day=start_day_override,
        )

    logger.info(
        "Budget set",
        extra={
            "user_id": user_id,
            "month": month,
            "year": year,
            "monthly_amount": str(monthly_amount),
            "start_day": start_day_override,
        },
    )

    _, _, total_fixed, total_incomes = await _period_totals(repo, user_id, month, year)

    await initialize_or_refresh_daily_log(
        repo,
        user_id=user_id,
        monthly_amount=monthly_amount,
        total_fixed_expenses=total_fixed,
        total_incomes=total_incomes,
        month=month,
        year=year,
        start_day=resolve_start_day(start_day_override, user_start_day),
        today=today,
    )
    return budget


async def add_expense(
    repo: BudgetRepository,
    user_id: int,
    amount: Number,
    description: Optional[str],
    category: ExpenseCategory = ExpenseCategory.OTHER,
    day: Optional[date] = None,
) -> ExpenseResult:
    """
    Record an expense and charge it to that day's log.

    When the day has no log yet the expense is stored but no ledger is
    touched, and the result carries daily_log=None.
    """
    day = day or date.today()
    amount = Amount(to_decimal(amount))
    category = ExpenseCategory(category)
    await _require_user(repo, user_id)

    expense = await repo.create_expense(
        user_id=user_id,
        amount=amount,
        description=description or None,
        category=category,
        day=day,
    )
    record_expense(category.value)

    log = await repo.find_daily_log(user_id, day)
    if log is None:
        # TODO: decide whether backdated expenses should create or rebuild historical logs
        ledger_skip_counter.inc()
        logger.warning(
            "Expense recorded without daily log",
            extra={"user_id": user_id, "expense_id": expense.id, "date": day.isoformat()},
        )
        return ExpenseResult(expense=expense, daily_log=None)

    total_spent = Amount(log.total_spent + amount)
    remaining = calculate_remaining(log.daily_budget, log.carryover, total_spent)
    await repo.update_daily_log(log.id, total_spent=total_spent, remaining=remaining)

    logger.info(
        "Expense recorded",
        extra={
            "user_id": user_id,
            "expense_id": expense.id,
            "amount": str(amount),
            "category": category.value,
            "remaining": str(remaining),
        },
    )
    return ExpenseResult(expense=expense, daily_log=replace(log, total_spent=total_spent, remaining=remaining))


async def delete_expense(
    repo: BudgetRepository,
    user_id: int,
    expense_id: int,
    expense_amount: Optional[Number] = None,
    expense_date: Optional[date] = None,
) -> Optional[DailyLog]:
    """
    Delete an expense and reverse its effect on that day's log.

    Callers that already hold the expense pass its amount and date. Otherwise
    the expense is looked up first; a missing or foreign expense raises
    ExpenseNotFoundError.
    """
    if expense_amount is None or expense_date is None:
        expense = await repo.find_expense(user_id, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        expense_amount, expense_date = expense.amount, expense.date

    amount = to_decimal(expense_amount)
    await repo.delete_expense(expense_id)
    expense_reversal_counter.inc()

    log = await repo.find_daily_log(user_id, expense_date)
    if log is None:
        logger.warning(
            "Expense deleted without daily log",
            extra={"user_id": user_id, "expense_id": expense_id, "date": expense_date.isoformat()},
        )
        return None

    total_spent = Amount(log.total_spent - amount)
    remaining = calculate_remaining(log.daily_budget, log.carryover, total_spent)
    await repo.update_daily_log(log.id, total_spent=total_spent, remaining=remaining)

    logger.info(
        "Expense reversed",
        extra={"user_id": user_id, "expense_id": expense_id, "remaining": str(remaining)},
    )
    return replace(log, total_spent=total_spent, remaining=remaining)


async def get_dashboard_data(
    repo: BudgetRepository,
    user_id: int,
    view_month: Optional[int] = None,
    view_year: Optional[int] = None,
    today: Optional[date] = None,
    locale: Optional[str] = None,
) -> DashboardSnapshot:
    """
    Build the dashboard snapshot for a labelled period.

    Flow:
    1. Resolve the label (explicit, or the period containing today)
    2. Load the budget; for the current period copy last period's budget
       when none exists yet
    3. Load fixed expenses and incomes, compute totals and daily allowance
    4. For the current period, make sure today's log exists
    5. Collect logs and expenses that fall inside the period

    Raises:
        UserNotFoundError: user_id has no user record
    """
    today = today or date.today()
    user = await _require_user(repo, user_id)
    user_start_day = user.month_start_day or 1

    if view_month and view_year:
        month, year = view_month, view_year
    else:
        label = get_period_for_date(today, user_start_day)
        month, year = label.month, label.year

    budget = await repo.find_budget(user_id, month, year)
    effective_start_day = resolve_start_day(budget.start_day if budget else None, user_start_day)
    period = get_budget_period(month, year, effective_start_day)
    viewing_current = is_current_period(month, year, effective_start_day, today)

    copied = False
    if budget is None and viewing_current:
        previous = get_previous_month(month, year)
        previous_budget = await repo.find_budget(user_id, previous.month, previous.year)
        if previous_budget is not None:
            budget = await repo.create_budget(
                user_id=user_id,
                monthly_amount=previous_budget.monthly_amount,
                month=month,
                year=year,
                start_day=None,
            )
            copied = True
            budget_copy_counter.inc()
            logger.info(
                "Budget copied from previous period",
                extra={"user_id": user_id, "month": month, "year": year, "from_budget_id": previous_budget.id},
            )

    fixed_expenses, incomes, total_fixed, total_incomes = await _period_totals(repo, user_id, month, year)
    monthly_amount = budget.monthly_amount if budget else ZERO

    daily_budget = (
        calculate_daily_budget(monthly_amount, total_incomes, total_fixed, period.days_in_period)
        if budget
        else Amount(ZERO)
    )

    today_log = None
    today_expenses = []
    if viewing_current:
        today_log = await repo.find_daily_log(user_id, today)
        if today_log is None and budget is not None:
            today_log = await initialize_or_refresh_daily_log(
                repo,
                user_id=user_id,
                monthly_amount=monthly_amount,
                total_fixed_expenses=total_fixed,
                total_incomes=total_incomes,
                month=month,
                year=year,
                start_day=effective_start_day,
                today=today,
            )
        today_expenses = await repo.find_expenses(user_id, today)

    spent_percent, overspent = None, False
    if today_log is not None:
        spent_percent, overspent = calculate_spending_percentage(
            today_log.total_spent, today_log.daily_budget + today_log.carryover
        )

    return DashboardSnapshot(
        user=user,
        budget=budget,
        period=period,
        effective_start_day=effective_start_day,
        user_start_day=user_start_day,
        daily_budget=daily_budget,
        total_fixed_expenses=total_fixed,
        total_incomes=total_incomes,
        available_for_period=calculate_available_for_period(monthly_amount, total_incomes, total_fixed),
        today=today,
        is_current_period=viewing_current,
        budget_copied_from_previous=copied,
        display=format_period_display(period, effective_start_day, locale or settings.default_locale),
        fixed_expenses=fixed_expenses,
        incomes=incomes,
        today_log=today_log,
        today_spent_percent=spent_percent,
        today_overspent=overspent,
        today_expenses=today_expenses,
        period_logs=await repo.find_daily_logs_between(user_id, period.start_date, period.end_date),
        period_expenses=await repo.find_expenses_between(user_id, period.start_date, period.end_date),
    )


async def refresh_today(repo: BudgetRepository, user_id: int, today: date) -> Optional[DailyLog]:
    """
    Recompute today's log after income or fixed-expense totals change.

    Does nothing when the current period has no budget.
    """
    user = await _require_user(repo, user_id)
    label = get_period_for_date(today, user.month_start_day or 1)

    budget = await repo.find_budget(user_id, label.month, label.year)
    if budget is None:
        return None

    _, _, total_fixed, total_incomes = await _period_totals(repo, user_id, label.month, label.year)
    return await initialize_or_refresh_daily_log(
        repo,
        user_id=user_id,
        monthly_amount=budget.monthly_amount,
        total_fixed_expenses=total_fixed,
        total_incomes=total_incomes,
        month=label.month,
        year=label.year,
        start_day=resolve_start_day(budget.start_day, user.month_start_day),
        today=today,
    )


async def add_fixed_expense(
    repo: BudgetRepository,
    user_id: int,
    name: str,
    amount: Number,
    today: Optional[date] = None,
) -> FixedExpense:
    today = today or date.today()
    await _require_user(repo, user_id)
    fixed_expense = await repo.create_fixed_expense(user_id, name, Amount(to_decimal(amount)))
    logger.info("Fixed expense added", extra={"user_id": user_id, "fixed_expense_id": fixed_expense.id})
    await refresh_today(repo, user_id, today)
    return fixed_expense


async def delete_fixed_expense(
    repo: BudgetRepository,
    user_id: int,
    fixed_expense_id: int,
    today: Optional[date] = None,
) -> bool:
    today = today or date.today()
    deleted = await repo.delete_fixed_expense(user_id, fixed_expense_id)
    if deleted:
        await refresh_today(repo, user_id, today)
    return deleted


async def add_income(
    repo: BudgetRepository,
    user_id: int,
    amount: Number,
    description: Optional[str] = None,
    today: Optional[date] = None,
) -> Income:
    """Record income against the period that contains today"""
    today = today or date.today()
    user = await _require_user(repo, user_id)
    label = get_period_for_date(today, user.month_start_day or 1)

    income = await repo.create_income(
        user_id=user_id,
        amount=Amount(to_decimal(amount)),
        description=description or None,
        month=label.month,
        year=label.year,
    )
    logger.info(
        "Income added",
        extra={"user_id": user_id, "income_id": income.id, "month": label.month, "year": label.year},
    )
    await refresh_today(repo, user_id, today)
    return income


async def delete_income(
    repo: BudgetRepository,
    user_id: int,
    income_id: int,
    today: Optional[date] = None,
) -> bool:
    today = today or date.today()
    deleted = await repo.delete_income(user_id, income_id)
    if deleted:
        await refresh_today(repo, user_id, today)
    return deleted


async def update_settings(
    repo: BudgetRepository,
    user_id: int,
    month_start_day: Optional[int] = None,
    currency: Optional[str] = None,
) -> User:
    """Change the user's default period start day and/or display currency"""
    user = await _require_user(repo, user_id)

    changes = {}
    if month_start_day is not None:
        changes["month_start_day"] = month_start_day
    if currency is not None:
        changes["currency"] = currency.upper()

    if changes:
        await repo.update_user(user_id, **changes)
        logger.info("User settings updated", extra={"user_id": user_id, **changes})
    return replace(user, **changes)
