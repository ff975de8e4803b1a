"""Shared fixtures for the core-api tests."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

import main
from auth import security
from core import db
from core.config import Config

SEARCH_URL = "http://search.test"
LEASE_SERVICE_URL = "http://lease-service.test"
TOKEN_SECRET = "test-secret"


@pytest.fixture
def config() -> Config:
    return Config.model_validate(
        {
            "auth": {"secret": TOKEN_SECRET, "token_expiry_seconds": 3600},
            "search": {"url": SEARCH_URL, "api_key": "test-key", "index": "leases"},
            "cache": {"host": "127.0.0.1", "port": 6379},
            "lease_service": {"url": LEASE_SERVICE_URL},
        }
    )


@pytest.fixture
def signer() -> security.TokenSigner:
    return security.TokenSigner(secret=TOKEN_SECRET, expiry_seconds=3600)


@pytest.fixture
def client(config: Config, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """App client with the lifespan running and the Postgres pool stubbed out."""
    monkeypatch.setattr(db, "init_pool", AsyncMock())
    monkeypatch.setattr(db, "close_pool", AsyncMock())

    app = main.create_app(config)
    with TestClient(app) as test_client:
        yield test_client
