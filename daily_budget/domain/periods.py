"""
Budget period calculations.

A budget period does not have to follow the calendar month. A user paid on
the 28th can run each period from the 28th to the 27th of the next month.
Periods are labelled by the (month, year) in which they start.
"""

import calendar
from datetime import date, timedelta
from typing import Dict, List

from daily_budget.domain.models import BudgetPeriod, PeriodLabel

MONTH_NAMES: Dict[str, List[str]] = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "es": [
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ],
}

MONTH_ABBREVIATIONS: Dict[str, List[str]] = {
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
    "es": ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"],
}

# "{month} {year}" order per language for calendar-month labels
MONTH_YEAR_FORMATS: Dict[str, str] = {
    "en": "{month} {year}",
    "es": "{month} de {year}",
}


def days_in_month(month: int, year: int) -> int:
    """Number of days in a calendar month (Gregorian leap years included)"""
    return calendar.monthrange(year, month)[1]


def effective_start_day(requested_day: int, month: int, year: int) -> int:
    """
    Clamp a start day to the last valid day of the month.

    Example: 30 in February 2026 -> 28, in February 2024 -> 29.
    """
    return min(requested_day, days_in_month(month, year))


def get_previous_month(month: int, year: int) -> PeriodLabel:
    if month == 1:
        return PeriodLabel(month=12, year=year - 1)
    return PeriodLabel(month=month - 1, year=year)


def get_next_month(month: int, year: int) -> PeriodLabel:
    if month == 12:
        return PeriodLabel(month=1, year=year + 1)
    return PeriodLabel(month=month + 1, year=year)


def get_budget_period(month: int, year: int, start_day: int = 1) -> BudgetPeriod:
    """
    Compute the date span of the period labelled (month, year).

    With start_day == 1 this is the calendar month. Otherwise the period runs
    from the clamped start day of the label month to the day before the
    clamped start day of the following month.

    Example:
        get_budget_period(1, 2026, 28) -> 2026-01-28 .. 2026-02-27, 31 days
    """
    if start_day == 1:
        start = date(year, month, 1)
        end = date(year, month, days_in_month(month, year))
    else:
        start = date(year, month, effective_start_day(start_day, month, year))
        following = get_next_month(month, year)
        end_day = effective_start_day(start_day - 1, following.month, following.year)
        end = date(following.year, following.month, end_day)

    return BudgetPeriod(
        month=month,
        year=year,
        start_date=start,
        end_date=end,
        days_in_period=(end - start).days + 1,
    )


def get_period_for_date(day: date, start_day: int = 1) -> PeriodLabel:
    """
    Find the label of the period a date belongs to.

    Dates before the (clamped) start day of their calendar month belong to
    the previous month's period, e.g. with start_day=28 2026-01-15 falls in
    the December 2025 period.
    """
    if start_day == 1:
        return PeriodLabel(month=day.month, year=day.year)

    if day.day >= effective_start_day(start_day, day.month, day.year):
        return PeriodLabel(month=day.month, year=day.year)
    return get_previous_month(day.month, day.year)


def is_date_in_period(day: date, period: BudgetPeriod) -> bool:
    return period.start_date <= day <= period.end_date


def get_current_budget_period(today: date, start_day: int = 1) -> BudgetPeriod:
    label = get_period_for_date(today, start_day)
    return get_budget_period(label.month, label.year, start_day)


def get_previous_period(month: int, year: int, start_day: int = 1) -> BudgetPeriod:
    prev = get_previous_month(month, year)
    return get_budget_period(prev.month, prev.year, start_day)


def get_next_period(month: int, year: int, start_day: int = 1) -> BudgetPeriod:
    following = get_next_month(month, year)
    return get_budget_period(following.month, following.year, start_day)


def is_current_period(month: int, year: int, start_day: int, today: date) -> bool:
    return get_period_for_date(today, start_day) == PeriodLabel(month=month, year=year)


def is_future_period(month: int, year: int, start_day: int, today: date) -> bool:
    """True when the period has not started yet"""
    return get_budget_period(month, year, start_day).start_date > today


def _language(locale: str) -> str:
    language = (locale or "en").replace("_", "-").split("-")[0].lower()
    return language if language in MONTH_NAMES else "en"


def format_period_display(period: BudgetPeriod, start_day: int = 1, locale: str = "en") -> str:
    """
    Human readable period label.

    "January 2026" for calendar months, "Jan 28 - Feb 27, 2026" for custom
    start days, "Dec 28, 2025 - Jan 27, 2026" when the span crosses a year.
    """
    language = _language(locale)

    if start_day == 1:
        return MONTH_YEAR_FORMATS[language].format(
            month=MONTH_NAMES[language][period.month - 1],
            year=period.year,
        )

    abbreviations = MONTH_ABBREVIATIONS[language]
    start, end = period.start_date, period.end_date
    start_text = f"{abbreviations[start.month - 1]} {start.day}"
    end_text = f"{abbreviations[end.month - 1]} {end.day}"

    if start.year != end.year:
        return f"{start_text}, {start.year} - {end_text}, {end.year}"
    return f"{start_text} - {end_text}, {end.year}"


def get_yesterday(day: date) -> date:
    return day - timedelta(days=1)


def are_dates_in_same_period(first: date, second: date, start_day: int = 1) -> bool:
    return get_period_for_date(first, start_day) == get_period_for_date(second, start_day)
