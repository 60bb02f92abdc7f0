from decimal import Decimal
import re

AMOUNT_PATTERN = re.compile(r"[0-9]+\.?[0-9]*")


class InvalidAmountError(Exception):
    """Raised when a user-supplied amount is not a plain non-negative number"""
    pass


def parse_amount(text: str) -> Decimal:
    """
    Parse an amount typed on the command line.

    Accepts a comma as the decimal separator and ignores spaces, so
    "1 000,5" parses as 1000.5.
    """
    normalized = text.replace(",", ".").replace(" ", "")
    if not AMOUNT_PATTERN.fullmatch(normalized):
        raise InvalidAmountError(f"Invalid amount: {text}")
    return Decimal(normalized)


def ton_to_rub(amount: Decimal, rate: Decimal) -> Decimal:
    return amount * rate


def rub_to_ton(amount: Decimal, rate: Decimal) -> Decimal:
    if rate <= 0:
        raise ValueError(f"Rate must be positive, got {rate}")
    return amount / rate
