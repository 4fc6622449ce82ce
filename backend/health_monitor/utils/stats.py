"""Small numeric and time helpers shared by the services."""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Iterable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a spreadsheet: halves go away from zero.

    The builtin round() uses banker's rounding, which makes 2.5 -> 2.
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def mean_ms(values: Iterable[int]) -> int:
    """Average of millisecond values rounded to a whole ms, 0 when empty."""
    values = list(values)
    if not values:
        return 0
    return int(round_half_up(sum(values) / len(values)))


def error_rate(successes: int, total: int) -> float:
    """Failure percentage with 2 decimal places."""
    return round_half_up(100 * (1 - successes / (total or 1)), 2)


def format_percent(value: float) -> str:
    """Percentage string with exactly 2 decimals, e.g. '99.50'."""
    return f"{round_half_up(value, 2):.2f}"
