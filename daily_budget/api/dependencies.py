"""Dependency injection for FastAPI endpoints"""

from datetime import date

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from daily_budget.domain.repository import BudgetRepository
from daily_budget.infrastructure.database.repositories import SqlBudgetRepository
from daily_budget.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: int = Header(..., description="Authenticated user id")) -> int:
    """User id resolved by the upstream auth/session layer"""
    return x_user_id


def get_today() -> date:
    """Calendar date the request is evaluated against"""
    return date.today()


def get_repository(db: Session = Depends(get_db)) -> BudgetRepository:
    """Provide the SQL-backed budget repository"""
    return SqlBudgetRepository(db)
