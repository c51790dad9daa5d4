"""Pytest fixtures for the SKU service.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database, fresh tables per test
- Repository and service wired to that session
- A test client with its own application instance and sequence counters

Usage:
    def test_create(client, sku_payload):
        response = client.post("/api/v1/skus", json=sku_payload())
        assert response.status_code == 201
"""

import os

# Set environment variables BEFORE any imports so settings pick them up
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("OTEL_ENABLED", "false")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from sku_service.database import engine as test_engine
from sku_service.database import get_db
from sku_service.domain.sku import SequenceCounters, SkuCodeGenerator
from sku_service.infrastructure.repositories import SkuRepository
from sku_service.models import Base
from sku_service.skus.service import SkuService

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    Each test gets a clean database state.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def repository(db_session: Session) -> SkuRepository:
    return SkuRepository(db_session)


@pytest.fixture(scope="function")
def counters() -> SequenceCounters:
    return SequenceCounters()


@pytest.fixture(scope="function")
def sku_service(repository: SkuRepository, counters: SequenceCounters) -> SkuService:
    return SkuService(repository, SkuCodeGenerator(counters, retailer_prefix="THD"))


@pytest.fixture
def sku_payload():
    """Factory for a valid create/replace payload; keyword args override fields."""

    def _make(**overrides) -> dict:
        payload = {
            "upc": "012345678901",
            "name": "2x4x8 Pressure Treated Lumber",
            "description": "Ground contact rated pressure treated pine",
            "brand": "WeatherShield",
            "category": "LBR",
            "subcategory": "PRESSURE_TREATED",
            "price": "8.99",
            "cost": "5.50",
            "unit_of_measure": "EACH",
            "quantity_per_unit": 1,
            "weight": "12.50",
            "dimensions": {"length": "96.00", "width": "3.50", "height": "1.50"},
            "tags": ["outdoor", "treated", "lumber"],
            "attributes": {"treatment_type": "ACQ"},
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client bound to the test session.

    Every test gets a new application, so sequence counters start empty.
    """
    from sku_service.main import create_app

    app = create_app()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
