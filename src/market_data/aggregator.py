from datetime import tzinfo
from decimal import Decimal, ROUND_DOWN
from typing import Iterable, List
import logging

import pandas as pd

from src.coingecko_api.models import PricePoint, PriceSample

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _decimal_mean(prices: pd.Series) -> Decimal:
    # Truncated to cents like a fixed-scale division
    total = sum(prices, Decimal(0))
    return (total / len(prices)).quantize(CENT, rounding=ROUND_DOWN)


def aggregate_monthly(points: Iterable[PricePoint], year: int, timezone: tzinfo) -> List[PriceSample]:
    """
    Average raw price observations per calendar month.

    Args:
        points: Price observations with millisecond Unix timestamps
        year: Only observations from this year (in ``timezone``) are kept
        timezone: Timezone that decides which month an observation falls in

    Returns:
        One sample per month that has observations, in calendar order
    """
    points = list(points)
    if not points:
        return []

    df = pd.DataFrame({
        'timestamp': [point.timestamp_ms for point in points],
        'price': [point.price for point in points],
    })
    df['timestamp'] = pd.to_datetime(df['timestamp'], unit='ms', utc=True).dt.tz_convert(timezone)
    df = df[df['timestamp'].dt.year == year]

    if df.empty:
        logger.warning(f"No price observations fall in {year}")
        return []

    monthly = df.groupby(df['timestamp'].dt.month)['price'].agg(_decimal_mean)
    samples = [PriceSample(month=int(month), average_price=price) for month, price in monthly.items()]

    logger.debug(f"Aggregated {len(df)} observations into {len(samples)} months")
    return samples
