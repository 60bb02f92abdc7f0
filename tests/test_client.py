from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
import pytz
import requests
from src.coingecko_api.client import CoinGeckoAPIError, CoinGeckoClient
from src.coingecko_api.models import PricePoint


def make_client(payload=None, error=None):
    response = Mock()
    response.json.return_value = payload
    if error is not None:
        response.raise_for_status.side_effect = error
    session = Mock()
    session.get.return_value = response
    return CoinGeckoClient(base_url="https://api.example.test/v3/", timeout=5, session=session), session


def test_get_simple_price():
    client, session = make_client({"the-open-network": {"rub": 245.17}})

    assert client.get_simple_price() == Decimal("245.17")
    session.get.assert_called_once_with(
        "https://api.example.test/v3/simple/price",
        params={"ids": "the-open-network", "vs_currencies": "rub"},
        timeout=5,
    )


@pytest.mark.parametrize("payload", [{}, {"the-open-network": {}}, {"the-open-network": {"rub": None}}])
def test_get_simple_price_missing_value(payload):
    client, _ = make_client(payload)
    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price()


def test_http_errors_become_api_errors():
    client, _ = make_client(error=requests.HTTPError("429 Too Many Requests"))
    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price()


def test_connection_errors_become_api_errors():
    client, session = make_client()
    session.get.side_effect = requests.ConnectionError("offline")
    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price()


def test_get_market_chart_range():
    client, session = make_client({"prices": [[1735689600000, 500.5], [1735776000000, 510]]})
    start = datetime(2025, 1, 1, tzinfo=pytz.UTC)
    end = datetime(2025, 1, 3, tzinfo=pytz.UTC)

    points = client.get_market_chart_range(start, end)

    assert points == [
        PricePoint(timestamp_ms=1735689600000.0, price=Decimal("500.5")),
        PricePoint(timestamp_ms=1735776000000.0, price=Decimal("510")),
    ]
    session.get.assert_called_once_with(
        "https://api.example.test/v3/coins/the-open-network/market_chart/range",
        params={"vs_currency": "rub", "from": 1735689600, "to": 1735862400},
        timeout=5,
    )


@pytest.mark.parametrize("payload", [{}, {"prices": None}, {"prices": [[1, "x"]]}, {"prices": [[1]]}])
def test_get_market_chart_range_malformed(payload):
    client, _ = make_client(payload)
    with pytest.raises(CoinGeckoAPIError):
        client.get_market_chart_range(datetime(2025, 1, 1, tzinfo=pytz.UTC), datetime(2025, 2, 1, tzinfo=pytz.UTC))
