"""
Terminal chart of monthly TON/RUB averages.

The chart is a fixed-height grid: every row maps to a price level and every
sample gets a column four characters wide. Points are joined to the previous
column with fill glyphs so the plot reads as a line rather than loose bars.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from enum import Enum
import logging
import math
from typing import List, Sequence

from src.coingecko_api.models import PriceSample
from src.utils.months import month_abbreviation

logger = logging.getLogger(__name__)

CHART_HEIGHT = 20
COLUMN_WIDTH = 4

GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
RESET = "\033[0m"

POINT = "●"
FILL = "█"
PARTIAL = "▒"

RULE = "  " + "─" * 44
CENT = Decimal("0.01")


class NoDataError(Exception):
    """Raised when there is nothing to plot"""
    pass


class Trend(Enum):
    UP = "UP"
    DOWN = "DOWN"
    FLAT = "FLAT"

    @classmethod
    def between(cls, previous: Decimal, current: Decimal) -> "Trend":
        if current > previous:
            return cls.UP
        if current < previous:
            return cls.DOWN
        return cls.FLAT

    @property
    def color(self) -> str:
        return {
            "UP": GREEN,
            "DOWN": RED,
            "FLAT": YELLOW,
        }[self.value]

    @property
    def arrow(self) -> str:
        return {
            "UP": "↑",
            "DOWN": "↓",
            "FLAT": "→",
        }[self.value]

    def paint(self, text: str) -> str:
        return f"{self.color}{text}{RESET}"


@dataclass(frozen=True)
class PriceChange:
    change: Decimal
    percent: Decimal
    trend: Trend

    def describe(self, unit: str = "") -> str:
        """Arrow, absolute change and signed percentage, e.g. '↓60.00 (-40.00%)'"""
        percent = "0.00" if self.trend is Trend.FLAT else f"{self.percent:+.2f}"
        return f"{self.trend.arrow}{abs(self.change):.2f}{unit} ({percent}%)"


@dataclass(frozen=True)
class ChartStatistics:
    minimum: Decimal
    maximum: Decimal
    mean: Decimal
    price_range: Decimal  # floored to 1 for a flat series
    total_change: PriceChange


def price_change(previous: Decimal, current: Decimal) -> PriceChange:
    """
    Change from ``previous`` to ``current``.

    The percentage is truncated to two decimals. ``previous`` must be non-zero.
    """
    change = current - previous
    percent = (change * 100 / previous).quantize(CENT, rounding=ROUND_DOWN)
    return PriceChange(change=change, percent=percent, trend=Trend.between(previous, current))


def scale_range(minimum: Decimal, maximum: Decimal) -> Decimal:
    """Vertical span of the grid; a flat series still gets a span of 1"""
    price_range = maximum - minimum
    if price_range == 0:
        return Decimal(1)
    return price_range


def bar_height(price: Decimal, minimum: Decimal, price_range: Decimal,
               height: int = CHART_HEIGHT) -> int:
    """Grid row of ``price``. Truncates, so boundary values land one row low."""
    return math.floor((price - minimum) * height / price_range)


def row_value(row: int, minimum: Decimal, price_range: Decimal,
              height: int = CHART_HEIGHT) -> Decimal:
    """Label value of ``row``. The step above ``minimum`` is truncated to a whole number."""
    return minimum + math.floor(price_range * row / height)


def compute_statistics(samples: Sequence[PriceSample]) -> ChartStatistics:
    if not samples:
        raise NoDataError("No data to display")

    prices = [sample.average_price for sample in samples]
    minimum = min(prices)
    maximum = max(prices)
    mean = sum(prices, Decimal(0)) / len(prices)

    return ChartStatistics(
        minimum=minimum,
        maximum=maximum,
        mean=mean,
        price_range=scale_range(minimum, maximum),
        total_change=price_change(prices[0], prices[-1]),
    )


def _validate_samples(samples: Sequence[PriceSample]):
    if not samples:
        raise NoDataError("No data to display")
    if len(samples) > 12:
        raise ValueError(f"Expected at most 12 monthly samples, got {len(samples)}")
    months = [sample.month for sample in samples]
    for previous, current in zip(months, months[1:]):
        if current <= previous:
            raise ValueError(f"Months must be strictly increasing, got {months}")


def _glyph(heights: List[int], col: int, row: int) -> str:
    height = heights[col]
    if height == row:
        return POINT
    if height < row:
        return " "
    if col == 0:
        return FILL
    # Bar below the point: solid while the previous column is as tall, shaded above it
    if row <= heights[col - 1]:
        return FILL
    return PARTIAL


def _grid_lines(prices: List[Decimal], minimum: Decimal, price_range: Decimal) -> List[str]:
    heights = [bar_height(price, minimum, price_range) for price in prices]
    padding = " " * (COLUMN_WIDTH - 1)
    lines = ["  RUB │"]

    for row in range(CHART_HEIGHT, -1, -1):
        # Labels on even rows only
        if row % 2 == 0:
            line = f"{row_value(row, minimum, price_range):5.0f} │"
        else:
            line = "      │"

        for col, price in enumerate(prices):
            symbol = _glyph(heights, col, row)
            if col > 0 and symbol != " ":
                symbol = Trend.between(prices[col - 1], price).paint(symbol)
            line += symbol + padding
        lines.append(line)

    lines.append("      └" + "─" * (COLUMN_WIDTH * len(prices)) + "→")
    return lines


def _month_axis(samples: Sequence[PriceSample]) -> str:
    labels = "".join(f"{sample.month:<{COLUMN_WIDTH}d}" for sample in samples)
    return f"       {labels} Months"


def _legend_lines(samples: Sequence[PriceSample], year: int) -> List[str]:
    lines = [f"  Monthly averages for {year}:", RULE]
    previous = None
    for sample in samples:
        head = f"  {month_abbreviation(sample.month):>3}: {sample.average_price:6.2f} ₽  "
        if previous is None:
            lines.append(head + "(start of year)")
        else:
            change = price_change(previous.average_price, sample.average_price)
            lines.append(head + change.trend.paint(change.describe()))
        previous = sample
    return lines


def _statistics_lines(stats: ChartStatistics, year: int) -> List[str]:
    total = stats.total_change
    return [
        f"  Statistics for {year}:",
        RULE,
        f"  Minimum:  {stats.minimum:.2f} ₽",
        f"  Maximum:  {stats.maximum:.2f} ₽",
        f"  Mean:     {stats.mean:.2f} ₽",
        f"  Range:    {stats.price_range:.2f} ₽",
        f"  Total:    {total.trend.paint(total.describe(' ₽'))}",
    ]


def render_price_chart(samples: Sequence[PriceSample], year: int) -> str:
    """
    Render monthly averages as a coloured terminal chart.

    Args:
        samples: Monthly averages in calendar order (1 to 12 entries)
        year: Year shown in the headings

    Returns:
        Chart text with ANSI colour codes

    Raises:
        NoDataError: If ``samples`` is empty
    """
    _validate_samples(samples)

    prices = [sample.average_price for sample in samples]
    stats = compute_statistics(samples)
    price_range = stats.price_range
    logger.debug(f"Rendering {len(samples)} months, min={stats.minimum} max={stats.maximum} range={price_range}")

    lines = ["", f"                    TON/RUB price chart for {year}", ""]
    lines += _grid_lines(prices, stats.minimum, price_range)
    lines.append(_month_axis(samples))
    lines.append("")
    lines += _legend_lines(samples, year)
    lines.append("")
    lines += _statistics_lines(stats, year)
    lines.append("")
    return "\n".join(lines)


def print_price_chart(samples: Sequence[PriceSample], year: int):
    """Print the monthly price chart to stdout"""
    print(render_price_chart(samples, year))
