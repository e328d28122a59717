"""Daily allowance math - how much may be spent per day of a period"""

from decimal import Decimal
from typing import Iterable, Tuple, Union

from daily_budget.domain.models import Amount, SignedAmount

Number = Union[int, float, Decimal]

ZERO = Decimal("0")


def to_decimal(value: Number) -> Decimal:
    """Convert ints/floats/Decimals without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def calculate_available_for_period(
    monthly_amount: Number,
    total_incomes: Number,
    total_fixed_expenses: Number,
) -> SignedAmount:
    """Money left for daily spending over the whole period (may be negative)"""
    return SignedAmount(
        to_decimal(monthly_amount) + to_decimal(total_incomes) - to_decimal(total_fixed_expenses)
    )


def calculate_daily_budget(
    monthly_amount: Number,
    total_incomes: Number,
    total_fixed_expenses: Number,
    days_in_period: int,
) -> Amount:
    """
    Per-day allowance for a period.

    Floors at zero: fixed expenses larger than budget plus income never
    produce a negative allowance.

    Example:
        (1000 + 500 - 300) / 31 -> 38.709...
    """
    available = calculate_available_for_period(monthly_amount, total_incomes, total_fixed_expenses)
    return Amount(max(ZERO, available / days_in_period))


def calculate_remaining(daily_budget: Number, carryover: Number, total_spent: Number) -> SignedAmount:
    return SignedAmount(to_decimal(daily_budget) + to_decimal(carryover) - to_decimal(total_spent))


def sum_amounts(items: Iterable) -> Amount:
    """Sum the .amount attribute of records"""
    return Amount(sum((to_decimal(item.amount) for item in items), ZERO))


def calculate_spending_percentage(spent: Number, total_budget: Number) -> Tuple[Decimal, bool]:
    """
    Spending progress for display.

    Returns: (percent capped at 150, is_overspent)
    """
    spent = to_decimal(spent)
    total_budget = to_decimal(total_budget)

    if total_budget <= 0:
        return (Decimal(100) if spent > 0 else ZERO), spent > 0

    percent = spent / total_budget * 100
    return min(percent, Decimal(150)), spent > total_budget
