"""
Test Configuration and Fixtures

This module provides:
- Environment setup (in-memory SQLite, mock payment gateway, test log dir)
- Database / record store fixtures backed by a fresh in-memory database
- Signed-in users and their bearer tokens
- A TestClient running the test app (see test/test_main.py)

Architecture:
- Unit tests (test/**/unit/): pure logic and AsyncMock collaborators
- Integration tests: real SQLite database through SQLAlchemy, or the ASGI app
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the log directory are read at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['PAYMENT_GATEWAY_MODE'] = 'mock'
    os.environ['PAYMENT_MOCK_AUTO_SETTLE'] = 'true'
    os.environ['PENDING_BOOKING_SWEEP_INTERVAL_SECONDS'] = '0'
    os.environ.pop('OTEL_EXPORTER_OTLP_ENDPOINT', None)

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator, Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
from prometheus_client import CollectorRegistry  # noqa: E402
import pytest  # noqa: E402

from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.metrics.booking_metrics import BookingMetrics  # noqa: E402
from src.service.booking.domain.entity.user_entity import CurrentUser  # noqa: E402
from src.service.booking.driven_adapter.repo.booking_record_store_impl import (  # noqa: E402
    BookingRecordStoreImpl,
)
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth  # noqa: E402
from test.util_constant import (  # noqa: E402
    ANOTHER_USER_EMAIL,
    ANOTHER_USER_ID,
    TEST_USER_EMAIL,
    TEST_USER_ID,
)


# =============================================================================
# Identity
# =============================================================================
@pytest.fixture(scope='session')
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.fixture
def user_token(jwt_auth: JwtAuth) -> str:
    return jwt_auth.create_jwt_token(user_id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def another_user_token(jwt_auth: JwtAuth) -> str:
    return jwt_auth.create_jwt_token(user_id=ANOTHER_USER_ID, email=ANOTHER_USER_EMAIL)


@pytest.fixture
def user(user_token: str) -> CurrentUser:
    return CurrentUser(id=TEST_USER_ID, email=TEST_USER_EMAIL, credential=user_token)


@pytest.fixture
def another_user(another_user_token: str) -> CurrentUser:
    return CurrentUser(id=ANOTHER_USER_ID, email=ANOTHER_USER_EMAIL, credential=another_user_token)


# =============================================================================
# Metrics (dedicated registry per test, no duplicate timeseries)
# =============================================================================
@pytest.fixture
def booking_metrics() -> BookingMetrics:
    return BookingMetrics(registry=CollectorRegistry())


# =============================================================================
# Database
# =============================================================================
@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """A fresh in-memory database per test"""
    db = Database(url='sqlite+aiosqlite:///:memory:')
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def booking_record_store(database: Database) -> BookingRecordStoreImpl:
    return BookingRecordStoreImpl(session_factory=database.session)


# =============================================================================
# API client
# =============================================================================
@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Each test gets its own app lifespan and therefore its own database"""
    from test.test_main import app

    with TestClient(app) as test_client:
        yield test_client
