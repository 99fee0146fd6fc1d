"""Order number generation."""

import time
from typing import Callable

ORDER_NUMBER_DIGITS = 6


def generate_order_number(
    prefix: str = "ORD-",
    clock: Callable[[], float] = time.time,
) -> str:
    """Prefix plus the last six digits of the current epoch time in milliseconds.

    Not unique: two orders created in the same millisecond, or exactly
    1,000,000 ms apart, share a number.
    """
    millis = str(int(clock() * 1000))
    return f"{prefix}{millis[-ORDER_NUMBER_DIGITS:].zfill(ORDER_NUMBER_DIGITS)}"
