from datetime import datetime
from decimal import Decimal

import pytz
from src.coingecko_api.models import PricePoint, PriceSample
from src.market_data.aggregator import aggregate_monthly

MOSCOW = pytz.timezone("Europe/Moscow")


def point(year, month, day, hour, price):
    moment = datetime(year, month, day, hour, tzinfo=pytz.UTC)
    return PricePoint(timestamp_ms=moment.timestamp() * 1000, price=Decimal(price))


def test_empty_points():
    assert aggregate_monthly([], 2025, MOSCOW) == []


def test_monthly_means_in_calendar_order():
    points = [
        point(2025, 1, 5, 12, "100"),
        point(2025, 1, 20, 12, "200"),
        point(2025, 2, 10, 12, "150"),
        point(2025, 3, 1, 12, "90.5"),
    ]
    assert aggregate_monthly(points, 2025, MOSCOW) == [
        PriceSample(month=1, average_price=Decimal("150.00")),
        PriceSample(month=2, average_price=Decimal("150.00")),
        PriceSample(month=3, average_price=Decimal("90.50")),
    ]


def test_mean_is_truncated_to_cents():
    points = [
        point(2025, 4, 1, 12, "1.00"),
        point(2025, 4, 2, 12, "1.00"),
        point(2025, 4, 3, 12, "1.02"),
    ]
    # 3.02 / 3 = 1.00666...
    [sample] = aggregate_monthly(points, 2025, MOSCOW)
    assert sample.average_price == Decimal("1.00")


def test_months_follow_the_configured_timezone():
    points = [
        # 22:00 UTC on Jan 31 is already February 1st in Moscow
        point(2025, 1, 31, 22, "300"),
        point(2025, 1, 15, 12, "100"),
    ]
    assert [s.month for s in aggregate_monthly(points, 2025, MOSCOW)] == [1, 2]
    assert [s.month for s in aggregate_monthly(points, 2025, pytz.UTC)] == [1]


def test_observations_from_other_years_are_dropped():
    points = [
        point(2024, 12, 15, 12, "50"),
        point(2025, 1, 15, 12, "100"),
    ]
    assert aggregate_monthly(points, 2025, MOSCOW) == [
        PriceSample(month=1, average_price=Decimal("100.00")),
    ]
    assert aggregate_monthly(points, 2023, MOSCOW) == []
