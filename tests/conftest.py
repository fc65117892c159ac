"""Pytest configuration and fixtures for marketplace tests."""

import pytest
from fastapi.testclient import TestClient

from marketplace.app import create_app
from marketplace.auth import create_principal_token
from marketplace.config import Settings
from marketplace.currency import Currency, CurrencyEngine
from marketplace.rbac import AccessControlEvaluator, Principal, Role


@pytest.fixture
def usd():
    return Currency(
        code="USD",
        name="US Dollar",
        symbol="$",
        symbol_position="before",
        decimal_places=2,
        thousands_separator=",",
        decimal_separator=".",
        exchange_rate=1,
        is_default=True,
    )


@pytest.fixture
def eur():
    return Currency(
        code="EUR",
        name="Euro",
        symbol="€",
        symbol_position="before",
        decimal_places=2,
        thousands_separator=".",
        decimal_separator=",",
        exchange_rate=0.85,
        is_default=False,
    )


@pytest.fixture
def jpy():
    return Currency(
        code="JPY",
        name="Japanese Yen",
        symbol="¥",
        decimal_places=0,
        exchange_rate=150.0,
    )


@pytest.fixture
def sek():
    return Currency(
        code="SEK",
        name="Swedish Krona",
        symbol="kr",
        symbol_position="after",
        thousands_separator=" ",
        decimal_separator=",",
        exchange_rate=10.5,
    )


@pytest.fixture
def engine(usd, eur, jpy, sek):
    return CurrencyEngine([usd, eur, jpy, sek])


@pytest.fixture
def make_evaluator():
    def _make(role, permissions=None):
        return AccessControlEvaluator.create(role, permissions or [])

    return _make


@pytest.fixture
def app():
    return create_app(Settings())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def _headers(role: Role, user_id: str = "user-1", permissions=None):
        token = create_principal_token(
            Principal(user_id=user_id, role=role, permissions=permissions or [])
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
