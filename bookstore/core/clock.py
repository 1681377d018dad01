# bookstore/core/clock.py
import time
from datetime import datetime, timedelta

MILLIS_PER_DAY = 24 * 60 * 60 * 1000


def now_millis() -> int:
    """Current time as epoch milliseconds (the unit used for expiry fields)."""
    return int(time.time() * 1000)


def millis_after_days(days: int) -> int:
    return now_millis() + days * MILLIS_PER_DAY


def delivery_estimate(lead_days: int) -> tuple[int, int, int]:
    """
    Estimated delivery `lead_days` from now.

    Returns (day_of_month, day_of_week, epoch_millis); day_of_week
    counts from Sunday = 0.
    """
    eta = datetime.now() + timedelta(days=lead_days)
    day_of_week = (eta.weekday() + 1) % 7
    return eta.day, day_of_week, int(eta.timestamp() * 1000)
