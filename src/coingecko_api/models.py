from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PricePoint:
    """Raw price observation from the market chart endpoint"""
    timestamp_ms: float
    price: Decimal


@dataclass(frozen=True)
class PriceSample:
    """Average price of one calendar month"""
    month: int  # 1-12
    average_price: Decimal
