# bookstore/schemas/cart.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from bookstore.schemas.pricing import PriceBreakdown

CurrencyCode = Literal["INR", "USD", "CAD", "EUR"]
CartOperation = Literal["add", "remove"]


class CartLineIn(SQLModel):
    book_id: uuid.UUID
    quantity: int = Field(gt=0)


class CartAddRequest(SQLModel):
    """
    Payload for adding books to the cart.

    Quantities above a book's max_quantity are clamped, not rejected.
    Address, currency and tip are updated only when provided.
    """

    model_config = ConfigDict(extra="forbid")

    lines: list[CartLineIn] = Field(min_length=1)
    address_id: uuid.UUID | None = None
    currency_code: CurrencyCode | None = None
    tip: float | None = None

    @field_validator("tip")
    @classmethod
    def clamp_tip(cls, v: float | None) -> float | None:
        if v is None:
            return v
        return max(v, 0)


class CartRemoveLine(SQLModel):
    """
    Line to remove. Omitting quantity (or asking for at least the held
    quantity) drops the whole line.
    """

    book_id: uuid.UUID
    quantity: int | None = Field(default=None, gt=0)


class CartRemoveRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    lines: list[CartRemoveLine] = Field(min_length=1)


class CartLineRead(SQLModel):
    book_id: uuid.UUID
    quantity: int
    title: str | None = None
    price: float | None = None
    category_id: uuid.UUID | None = None
    author_id: uuid.UUID | None = None
    max_quantity: int | None = None


class DeliveryEstimate(SQLModel):
    date: int
    day: int
    time: int


class CartRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    address_id: uuid.UUID | None
    currency_code: str
    tip: float
    gift_card_id: uuid.UUID | None
    promo_code_id: uuid.UUID | None
    delivery: DeliveryEstimate | None = None
    lines: list[CartLineRead]
    created_at: datetime
    updated_at: datetime


class CartMutationResult(SQLModel):
    """
    Result of an add/remove.

    `cart` is False when there is no cart (never created, or deleted
    because its last line was removed).
    """

    cart: bool
    updated_cart: CartRead | None = None
    message: str | None = None


class CartSummary(SQLModel):
    """
    Cart with a freshly computed price breakdown.

    price_breakup is None when the attached promo code no longer applies.
    """

    cart: bool
    detail: CartRead | None = None
    price_breakup: PriceBreakdown | None = None


class PhoneNumber(SQLModel):
    country_code: str
    phone_number: str


class AddressCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    country: str
    recipient_name: str
    phones: list[PhoneNumber] = []
    house_no: str
    city: str
    landmark: str | None = None
    pincode: int
    state: str
    tag: str = "Home"

    @field_validator("country", "recipient_name", "house_no", "city", "state")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AddressRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    country: str
    recipient_name: str
    phones: list[PhoneNumber]
    house_no: str
    city: str
    landmark: str | None
    pincode: int
    state: str
    tag: str
    created_at: datetime
