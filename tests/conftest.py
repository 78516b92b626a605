"""Pytest fixtures for testing"""

from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from vfcash_gateway.api.main import create_app
from vfcash_gateway.config import settings
from vfcash_gateway.domain.models import Limits, Transaction
from vfcash_gateway.domain.validation import validate_transaction
from vfcash_gateway.infrastructure.database.session import build_engine, build_session_factory
from vfcash_gateway.infrastructure.storage.factory import default_limits
from vfcash_gateway.infrastructure.storage.memory import BoundedTransactionStore, InMemoryLimitsStore


@pytest.fixture
def make_payload() -> Callable[..., Dict[str, Any]]:
    """Build a valid wire-format transaction, overriding any field"""

    def _make(transaction_id: str = "t1", **overrides: Any) -> Dict[str, Any]:
        payload = {
            "id": transaction_id,
            "type": "transfer",
            "amount": 50,
            "phoneNumber": "01012345678",
            "date": "2024-01-01T00:00:00Z",
            "balanceBefore": 100,
            "balanceAfter": 50,
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def make_transaction(make_payload) -> Callable[..., Transaction]:
    """Build a validated domain Transaction"""

    def _make(transaction_id: str = "t1", **overrides: Any) -> Transaction:
        return validate_transaction(make_payload(transaction_id, **overrides))

    return _make


@pytest.fixture
def limits() -> Limits:
    return default_limits(settings)


@pytest.fixture
def transaction_store() -> BoundedTransactionStore:
    return BoundedTransactionStore(capacity=settings.max_transactions)


@pytest.fixture
def limits_store(limits: Limits) -> InMemoryLimitsStore:
    return InMemoryLimitsStore(limits)


@pytest.fixture
def session_factory() -> sessionmaker:
    """Fresh in-memory SQLite database per test"""
    return build_session_factory(build_engine("sqlite:///:memory:"))


@pytest.fixture
def client(transaction_store: BoundedTransactionStore, limits_store: InMemoryLimitsStore) -> TestClient:
    """Create FastAPI test client with isolated stores"""
    app = create_app(transaction_store=transaction_store, limits_store=limits_store)
    return TestClient(app)
