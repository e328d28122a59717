"""Integration tests for the SQLAlchemy repository"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from daily_budget.config import settings
from daily_budget.domain.exceptions import StorageError
from daily_budget.domain.models import ExpenseCategory
from daily_budget.infrastructure.database.models import UserRow
from daily_budget.infrastructure.database.repositories import SqlBudgetRepository


@pytest.fixture
def sql_repo(db: Session) -> SqlBudgetRepository:
    return SqlBudgetRepository(db)


async def test_duplicate_daily_log_is_retried_as_update(sql_repo: SqlBudgetRepository):
    user = await sql_repo.create_user("dup@example.com")
    day = date(2026, 1, 15)

    first = await sql_repo.create_daily_log(
        user_id=user.id,
        day=day,
        daily_budget=Decimal("20"),
        carryover=Decimal("5"),
        total_spent=Decimal("3"),
        remaining=Decimal("22"),
    )
    second = await sql_repo.create_daily_log(
        user_id=user.id,
        day=day,
        daily_budget=Decimal("10"),
        carryover=Decimal("0"),
        total_spent=Decimal("0"),
        remaining=Decimal("10"),
    )

    assert second.id == first.id
    assert second.daily_budget == Decimal("10")
    assert second.carryover == Decimal("5")
    assert second.total_spent == Decimal("3")
    assert second.remaining == Decimal("12")
    assert len(await sql_repo.find_daily_logs_between(user.id, day, day)) == 1


async def test_updating_missing_row_raises_storage_error(sql_repo: SqlBudgetRepository):
    with pytest.raises(StorageError):
        await sql_repo.update_daily_log(4242, remaining=Decimal("1"))


async def test_expense_queries_are_scoped_by_user_and_date(sql_repo: SqlBudgetRepository):
    owner = await sql_repo.create_user("owner@example.com")
    other = await sql_repo.create_user("other@example.com")

    kept = await sql_repo.create_expense(owner.id, Decimal("4.20"), "Bus", ExpenseCategory.TRANSPORT, date(2026, 1, 10))
    await sql_repo.create_expense(owner.id, Decimal("8"), None, ExpenseCategory.FOOD, date(2026, 2, 1))
    await sql_repo.create_expense(other.id, Decimal("9"), None, ExpenseCategory.FOOD, date(2026, 1, 10))

    january = await sql_repo.find_expenses_between(owner.id, date(2026, 1, 1), date(2026, 1, 31))
    assert [e.id for e in january] == [kept.id]
    assert january[0].category == ExpenseCategory.TRANSPORT

    assert await sql_repo.find_expense(other.id, kept.id) is None
    assert (await sql_repo.find_expense(owner.id, kept.id)).amount == Decimal("4.20")

    await sql_repo.delete_expense(kept.id)
    assert await sql_repo.find_expenses(owner.id, date(2026, 1, 10)) == []


async def test_budget_lookup_by_label(sql_repo: SqlBudgetRepository):
    user = await sql_repo.create_user("label@example.com", month_start_day=28)

    budget = await sql_repo.create_budget(user.id, Decimal("1500"), 12, 2025, start_day=None)
    await sql_repo.update_budget(budget.id, monthly_amount=Decimal("1600"), start_day=10)

    found = await sql_repo.find_budget(user.id, 12, 2025)
    assert found.monthly_amount == Decimal("1600")
    assert found.start_day == 10
    assert await sql_repo.find_budget(user.id, 1, 2026) is None


async def test_fixed_expense_delete_is_owner_scoped(sql_repo: SqlBudgetRepository):
    owner = await sql_repo.create_user("fixed@example.com")
    other = await sql_repo.create_user("intruder@example.com")
    fixed = await sql_repo.create_fixed_expense(owner.id, "Rent", Decimal("700"))

    assert await sql_repo.delete_fixed_expense(other.id, fixed.id) is False
    assert await sql_repo.delete_fixed_expense(owner.id, fixed.id) is True
    assert await sql_repo.find_fixed_expenses(owner.id) == []


async def test_create_user_uses_configured_currency(sql_repo: SqlBudgetRepository, monkeypatch):
    monkeypatch.setattr(settings, "default_currency", "GBP")

    user = await sql_repo.create_user("gbp@example.com")

    assert user.currency == "GBP"
    assert (await sql_repo.find_user(user.id)).currency == "GBP"


def test_user_row_currency_column_default(db: Session, monkeypatch):
    monkeypatch.setattr(settings, "default_currency", "CHF")

    row = UserRow(email="chf@example.com")
    db.add(row)
    db.flush()

    assert row.currency == "CHF"
