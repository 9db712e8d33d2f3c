from decimal import Decimal, ROUND_HALF_UP

from fintrack import config

NBSP = "\u00a0"


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(value: float) -> str:
    """Group thousands with a non-breaking space, keep up to two decimals.

    85000 -> "85 000", 1234.5 -> "1 234,5" (decimal comma).
    """
    text = f"{abs(value):,.2f}".rstrip("0").rstrip(".")
    text = text.replace(",", NBSP).replace(".", ",")
    return f"-{text}" if value < 0 else text


def money(value: float) -> str:
    return f"{format_amount(value)} {config.CURRENCY}"


def signed_money(value: float) -> str:
    """Balance label: "+" for zero and above, a minus sign below."""
    sign = "+" if value >= 0 else "−"
    return f"{sign}{format_amount(abs(value))} {config.CURRENCY}"


def percent_label(value: float) -> str:
    return f"{round_half_away(value)}%"
