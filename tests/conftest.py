"""Shared test fixtures for the Vehicle History API."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from vehicle_history_api.app.core.config import Settings
from vehicle_history_api.app.core.db import RecordStore
from vehicle_history_api.app.main import create_app

HONDA_VIN = "1HGCM82633A004352"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Provide a path for a throwaway SQLite database."""
    return tmp_path / "vehicle_history_test.db"


@pytest.fixture
def settings(db_path: Path) -> Settings:
    """Settings pointing at the temp database with minting disabled."""
    return Settings(database_url=str(db_path), token_mint_endpoint=None, token_mint_key=None)


@pytest.fixture
def store(db_path: Path) -> Iterator[RecordStore]:
    """Provide a connected RecordStore on the temp database."""
    record_store = RecordStore(str(db_path)).connect()
    yield record_store
    record_store.close()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Provide a TestClient with the application lifespan running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def vehicle_payload() -> dict[str, Any]:
    """Request body for the Honda Accord used across tests."""
    return {
        "vin": HONDA_VIN,
        "make": "Honda",
        "model": "Accord",
        "year": 2003,
        "ownerAddress": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
    }


@pytest.fixture
def log_payload() -> dict[str, Any]:
    """Request body for a valid service log."""
    return {
        "serviceType": "Oil change",
        "serviceDate": "2024-03-15",
        "mileage": 152000,
        "description": "Synthetic 5W-30 and a new filter",
        "cost": 89.99,
    }
