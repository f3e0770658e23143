"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a budget amount string into a non-negative Decimal.

    Budget amounts carry no sign; income versus expense is the entry's type.
    Handles various formats:
    - "123.45"
    - "$123.45", "€123.45"
    - "1,234.56"
    - "1 234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str.strip())

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(
            f"Amount must not be negative, got '{amount_str}'. Use --type to record income or expense"
        )
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
