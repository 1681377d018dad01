# bookstore/models/common.py
from enum import IntEnum


class RecordStatus(IntEnum):
    """
    Soft-delete lifecycle shared by books, gift cards and promo codes.

    New records start ACTIVE. ARCHIVED and DELETED are terminal: nothing
    moves a record back to ACTIVE.
    """

    DELETED = 0
    ACTIVE = 1
    ARCHIVED = 2


# Currencies accepted by carts, gift cards and promo codes
CURRENCY_CODES = ("INR", "USD", "CAD", "EUR")
DEFAULT_CURRENCY = "INR"
