from .aggregator import aggregate_monthly

__all__ = ['aggregate_monthly']
