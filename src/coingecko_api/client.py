from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional
import logging

import requests

from src.coingecko_api.models import PricePoint

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.coingecko.com/api/v3"
TON_COIN_ID = "the-open-network"
RUB = "rub"


class CoinGeckoAPIError(Exception):
    """Raised when the price API is unreachable or returns unusable data"""
    pass


class CoinGeckoClient:
    """Thin wrapper around the CoinGecko REST endpoints used by the converter"""

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        """
        Args:
            base_url: API root, e.g. "https://api.coingecko.com/api/v3"
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict) -> Dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {str(e)}")
            raise CoinGeckoAPIError(f"Request to {url} failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {str(e)}")
            raise CoinGeckoAPIError(f"Invalid JSON from {url}") from e

    def get_simple_price(self, coin_id: str = TON_COIN_ID, vs_currency: str = RUB) -> Decimal:
        """Current price of one coin in ``vs_currency``"""
        data = self._get("simple/price", {"ids": coin_id, "vs_currencies": vs_currency})
        try:
            value = data[coin_id][vs_currency]
            price = Decimal(str(value))
        except (KeyError, TypeError, InvalidOperation) as e:
            logger.error(f"Unexpected simple price payload: {data}")
            raise CoinGeckoAPIError(f"No {vs_currency} price for {coin_id} in response") from e

        if not price.is_finite():
            raise CoinGeckoAPIError(f"Non-numeric price for {coin_id}: {value}")
        return price

    def get_market_chart_range(self, start: datetime, end: datetime,
                               coin_id: str = TON_COIN_ID, vs_currency: str = RUB) -> List[PricePoint]:
        """
        Historical prices between two moments.

        Args:
            start: Range start (inclusive)
            end: Range end (inclusive)
            coin_id: CoinGecko coin id
            vs_currency: Quote currency code

        Returns:
            Price points in the order the API returns them (oldest first)
        """
        params = {
            "vs_currency": vs_currency,
            "from": int(start.timestamp()),
            "to": int(end.timestamp()),
        }
        data = self._get(f"coins/{coin_id}/market_chart/range", params)

        prices = data.get("prices") if isinstance(data, dict) else None
        if not isinstance(prices, list):
            logger.error(f"Unexpected market chart payload: {data}")
            raise CoinGeckoAPIError("Market chart response has no price list")

        points = []
        for entry in prices:
            try:
                timestamp_ms, price = entry
                points.append(PricePoint(timestamp_ms=float(timestamp_ms), price=Decimal(str(price))))
            except (TypeError, ValueError, InvalidOperation) as e:
                raise CoinGeckoAPIError(f"Malformed price entry: {entry}") from e

        logger.info(f"Fetched {len(points)} {coin_id}/{vs_currency} prices")
        return points
