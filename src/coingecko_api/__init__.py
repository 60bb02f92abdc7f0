"""
Client for the public CoinGecko price API.
"""

from .client import CoinGeckoClient, CoinGeckoAPIError
from .models import PricePoint, PriceSample

__all__ = ['CoinGeckoClient', 'CoinGeckoAPIError', 'PricePoint', 'PriceSample']
