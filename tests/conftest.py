"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finavatar.api.main import create_app
from finavatar.infrastructure.database.models import Base
from finavatar.infrastructure.database.session import get_db
from finavatar.domain.habits import HabitAnalytics
from finavatar.domain.models import FinancialSnapshot, Habit


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for window-dependent habit logic"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def analytics(clock: FakeClock) -> HabitAnalytics:
    """Empty habit engine on a fixed clock"""
    return HabitAnalytics(clock=clock)


@pytest.fixture
def make_habit():
    """Factory for habits dated relative to NOW"""
    counter = {"n": 0}

    def _make(
        category: str = "Food",
        amount: float = 10.0,
        frequency: str = "daily",
        days_ago: float = 0,
        is_recurring: bool = False,
        owner_id: str = "user_1",
    ) -> Habit:
        counter["n"] += 1
        return Habit(
            id=f"habit_{counter['n']}",
            owner_id=owner_id,
            category=category,
            amount=amount,
            frequency=frequency,
            description=f"{category} spend",
            is_recurring=is_recurring,
            created_at=NOW - timedelta(days=days_ago),
        )

    return _make


@pytest.fixture
def healthy_snapshot() -> FinancialSnapshot:
    """Saver with low debt and moderate goals"""
    return FinancialSnapshot(
        monthly_income=5000,
        monthly_expenses=3000,
        savings=1000,
        debt=500,
        investments=500,
        goal_profile="moderate",
    )
