import os
from datetime import date, datetime, timedelta, timezone

import pytest

# Point the app at an in-memory database before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CRON_SECRET"] = "test-cron-secret"

from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, create_tables, get_engine, get_session_local  # noqa: E402
from app.dependencies import get_now  # noqa: E402
from app.main import app  # noqa: E402
from app.middleware.rate_limit import limiter  # noqa: E402


class FrozenClock:
    """Mutable 'now' injected into every request through the get_now dependency."""

    def __init__(self, now: datetime):
        self.now = now

    @property
    def today(self) -> date:
        return self.now.date()

    def advance(self, days: int = 0, hours: int = 0) -> datetime:
        self.now = self.now + timedelta(days=days, hours=hours)
        return self.now


@pytest.fixture
def db_session():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    create_tables()
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def client(db_session, clock):
    limiter.reset()
    app.dependency_overrides[get_now] = lambda: clock.now
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
