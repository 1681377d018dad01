# bookstore/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

from bookstore.models.common import DEFAULT_CURRENCY


class Cart(SQLModel, table=True):
    """
    Shopping cart aggregate. One cart per user.

    Gift card and promo code are weak references: detaching them never
    touches the referenced records.
    """

    __tablename__ = "carts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    address_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="addresses.id",
    )

    # INR | USD | CAD | EUR
    currency_code: str = Field(default=DEFAULT_CURRENCY)

    tip: float = Field(default=0, ge=0)

    gift_card_id: uuid.UUID | None = Field(default=None, index=True)
    promo_code_id: uuid.UUID | None = Field(default=None, index=True)

    # Delivery estimate, refreshed on every line mutation
    delivery_date: int | None = Field(default=None, description="Day of month")
    delivery_day: int | None = Field(default=None, description="Day of week, Sunday = 0")
    delivery_time: int | None = Field(default=None, description="Epoch millis")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CartLine(SQLModel, table=True):
    """
    One (book, quantity) pair inside a cart.
    A cart cannot hold two lines for the same book.
    """

    __tablename__ = "cart_lines"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID = Field(
        foreign_key="carts.id",
        index=True,
    )

    book_id: uuid.UUID = Field(
        foreign_key="books.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    position: int = Field(
        default=0,
        description="Insertion order within the cart",
    )
