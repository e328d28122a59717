"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from daily_budget.api.dependencies import get_today
from daily_budget.api.main import create_app
from daily_budget.domain.models import User
from daily_budget.infrastructure.database.models import Base, UserRow
from daily_budget.infrastructure.database.session import get_db
from daily_budget.infrastructure.memory import InMemoryBudgetRepository


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Mid-period date for a calendar-month user
TODAY = date(2026, 1, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def repo() -> InMemoryBudgetRepository:
    """Fresh in-memory storage per test"""
    return InMemoryBudgetRepository()


@pytest.fixture
async def user(repo: InMemoryBudgetRepository) -> User:
    """Calendar-month user (start day 1)"""
    return await repo.create_user("alex@example.com")


@pytest.fixture
async def payday_user(repo: InMemoryBudgetRepository) -> User:
    """User whose periods start on the 28th"""
    return await repo.create_user("sam@example.com", month_start_day=28)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a pinned calendar date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def user_headers(db: Session) -> dict:
    """Persist a user and return the header that identifies it"""
    row = UserRow(email="alex@example.com", month_start_day=1)
    db.add(row)
    db.commit()
    return {"X-User-ID": str(row.id)}
