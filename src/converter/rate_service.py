from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional
import logging

from src.cache.file_cache import CacheEntry, FileCache
from src.coingecko_api.client import CoinGeckoAPIError, CoinGeckoClient, RUB, TON_COIN_ID
from src.coingecko_api.models import PriceSample
from src.market_data.aggregator import aggregate_monthly

logger = logging.getLogger(__name__)

RATE_CACHE_KEY = "rate"
HISTORY_CACHE_KEY = "yearly_data"

DEFAULT_RATE_TTL = 60  # seconds
DEFAULT_HISTORY_TTL = 3600  # 1 hour


class RateService:
    """Current TON/RUB rate and this year's monthly averages, cached on disk"""

    def __init__(self, client: CoinGeckoClient, cache: FileCache, timezone,
                 rate_ttl: float = DEFAULT_RATE_TTL, history_ttl: float = DEFAULT_HISTORY_TTL,
                 coin_id: str = TON_COIN_ID, vs_currency: str = RUB):
        self.client = client
        self.cache = cache
        self.timezone = timezone
        self.rate_ttl = rate_ttl
        self.history_ttl = history_ttl
        self.coin_id = coin_id
        self.vs_currency = vs_currency

    def _cached_rate(self) -> Optional[CacheEntry]:
        entry = self.cache.get(RATE_CACHE_KEY)
        if entry is None:
            return None
        try:
            rate = Decimal(str(entry.value))
        except InvalidOperation:
            rate = None
        if rate is None or not rate.is_finite() or rate <= 0:
            logger.warning(f"Ignoring invalid cached rate: {entry.value}")
            return None
        return CacheEntry(value=rate, age=entry.age)

    def get_rate(self) -> Decimal:
        """
        Price of 1 TON in RUB.

        Served from cache while younger than ``rate_ttl``. If the API cannot be
        reached a stale cached rate is used instead; without one the error
        propagates.
        """
        cached = self._cached_rate()
        if cached is not None and cached.age < self.rate_ttl:
            logger.debug(f"Using cached rate {cached.value} ({cached.age:.0f}s old)")
            return cached.value

        try:
            rate = self.client.get_simple_price(self.coin_id, self.vs_currency)
        except CoinGeckoAPIError as e:
            if cached is None:
                raise
            logger.warning(f"Could not refresh rate ({str(e)}), using cached value from {cached.age:.0f}s ago")
            return cached.value

        if rate <= 0:
            raise CoinGeckoAPIError(f"Unexpected non-positive rate: {rate}")

        self.cache.put(RATE_CACHE_KEY, rate)
        logger.info(f"Fetched current rate: 1 TON = {rate} RUB")
        return rate

    def _cached_samples(self, year: int) -> Optional[List[PriceSample]]:
        entry = self.cache.get(HISTORY_CACHE_KEY)
        if entry is None or entry.age >= self.history_ttl:
            return None

        try:
            if entry.value["year"] != year:
                logger.debug(f"Cached history is for {entry.value['year']}, not {year}")
                return None
            samples = [
                PriceSample(month=int(item["month"]), average_price=Decimal(str(item["average_price"])))
                for item in entry.value["samples"]
            ]
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning(f"Ignoring malformed cached history: {str(e)}")
            return None

        logger.info(f"Using cached data (updated {int(entry.age // 60)} min ago)")
        return samples

    def get_yearly_samples(self, now: Optional[datetime] = None) -> List[PriceSample]:
        """
        Monthly average prices from January 1st of the current year up to ``now``.

        Args:
            now: Current moment; defaults to the wall clock in ``timezone``

        Returns:
            Monthly samples in calendar order (possibly empty)
        """
        now = now or datetime.now(self.timezone)

        samples = self._cached_samples(now.year)
        if samples is not None:
            return samples

        start = self.timezone.localize(datetime(now.year, 1, 1))
        logger.info(f"Loading data for {now.year}...")
        points = self.client.get_market_chart_range(start, now, self.coin_id, self.vs_currency)
        samples = aggregate_monthly(points, now.year, self.timezone)

        if samples:
            self.cache.put(HISTORY_CACHE_KEY, {
                "year": now.year,
                "samples": [{"month": s.month, "average_price": s.average_price} for s in samples],
            })
        return samples
