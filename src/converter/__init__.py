from .amounts import InvalidAmountError, parse_amount, rub_to_ton, ton_to_rub
from .rate_service import RateService

__all__ = ['InvalidAmountError', 'parse_amount', 'rub_to_ton', 'ton_to_rub', 'RateService']
