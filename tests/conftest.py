"""Shared test fixtures for the quote relay."""

import pytest

from cotacao.config import (
    AppSettings,
    ClientSettings,
    ServerSettings,
    StoreSettings,
    UpstreamSettings,
)
from cotacao.models import Quote

UPSTREAM_URL = "https://quotes.test/json/last"


def _make_upstream_payload() -> dict:
    """AwesomeAPI-shaped body for USD-BRL."""
    inner = {
        "code": "USD",
        "codein": "BRL",
        "name": "Dólar Americano/Real Brasileiro",
        "high": "5.4612",
        "low": "5.4105",
        "varBid": "0.0123",
        "pctChange": "0.23",
        "bid": "5.43",
        "ask": "5.4312",
        "timestamp": "1718920800",
        "create_date": "2024-06-20 19:00:00",
    }
    return {"USDBRL": inner}


def _make_quote() -> Quote:
    """Quote matching _make_upstream_payload() defaults."""
    values = {
        "code": "USD",
        "codein": "BRL",
        "name": "Dólar Americano/Real Brasileiro",
        "high": "5.4612",
        "low": "5.4105",
        "var_bid": "0.0123",
        "pct_change": "0.23",
        "bid": "5.43",
        "ask": "5.4312",
        "timestamp": "1718920800",
        "create_date": "2024-06-20 19:00:00",
    }
    return Quote(**values)


@pytest.fixture
def upstream_settings() -> UpstreamSettings:
    """Upstream settings pointing at a test host with the default 200ms budget."""
    return UpstreamSettings(base_url=UPSTREAM_URL, pair="USD-BRL", timeout_seconds=0.2)


@pytest.fixture
def store_settings() -> StoreSettings:
    """In-memory store with a 1s budget so real writes never race the deadline."""
    return StoreSettings(enabled=True, db_path=":memory:", timeout_seconds=1.0)


@pytest.fixture
def mock_settings(
    upstream_settings: UpstreamSettings, store_settings: StoreSettings, tmp_path
) -> AppSettings:
    """Return AppSettings with test defaults; the client sink lives in tmp_path."""
    return AppSettings(
        log_level="DEBUG",
        upstream=upstream_settings,
        store=store_settings,
        server=ServerSettings(host="127.0.0.1", port=8080),
        client=ClientSettings(
            service_url="http://localhost:8080/cotacao",
            timeout_seconds=0.3,
            output_path=str(tmp_path / "cotacao.txt"),
        ),
    )


@pytest.fixture
def upstream_payload() -> dict:
    """Upstream USD-BRL response body with bid 5.43."""
    return _make_upstream_payload()


@pytest.fixture
def quote() -> Quote:
    """Quote decoded from upstream_payload."""
    return _make_quote()
