"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fx_gateway.api.main import create_app
from fx_gateway.domain.deal_import import DealImportService
from fx_gateway.domain.models import DealSubmission
from fx_gateway.infrastructure.database.models import Base
from fx_gateway.infrastructure.database.repositories import DealRepository
from fx_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PAST_TIMESTAMP = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


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
def repository(db: Session) -> DealRepository:
    return DealRepository(db)


@pytest.fixture
def service(repository: DealRepository) -> DealImportService:
    return DealImportService(repository)


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
def make_submission() -> Callable[..., DealSubmission]:
    """Build a valid deal submission, overriding any field"""

    def _make(**overrides: Any) -> DealSubmission:
        fields: Dict[str, Any] = {
            "deal_unique_id": "DEAL-001",
            "from_currency_code": "USD",
            "to_currency_code": "EUR",
            "deal_timestamp": PAST_TIMESTAMP,
            "deal_amount": Decimal("1000.00"),
        }
        fields.update(overrides)
        return DealSubmission(**fields)

    return _make


@pytest.fixture
def make_payload() -> Callable[..., Dict[str, Any]]:
    """Build a valid JSON deal body, overriding any field"""

    def _make(**overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "deal_unique_id": "DEAL-001",
            "from_currency_code": "USD",
            "to_currency_code": "EUR",
            "deal_timestamp": "2024-01-15T10:30:00Z",
            "deal_amount": "1000.00",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def future_timestamp() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=1)
