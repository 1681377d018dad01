# bookstore/schemas/gift_card.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

CurrencyCode = Literal["INR", "USD", "CAD", "EUR"]


class GiftCardCreate(SQLModel):
    """
    Payload for issuing a gift card.

    Backend derives:
      - issuer from the authenticated actor
      - expiry_timestamp from GIFT_CARD_EXPIRY_DAYS
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None
    amount: float = Field(ge=0)
    recipient_id: uuid.UUID
    currency_code: CurrencyCode = "INR"

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class GiftCardUpdate(SQLModel):
    """
    Admin partial update.

    `expiry_days` restarts the card's lifetime: expiry becomes now + days.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    amount: float | None = Field(default=None, ge=0)
    recipient_id: uuid.UUID | None = None
    expiry_days: int | None = Field(default=None, gt=0)


class GiftCardRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
    amount: float
    issuer_type: str
    issuer_id: uuid.UUID | None
    issuer_email: str | None
    recipient_id: uuid.UUID
    currency_code: str
    status: int
    expiry_timestamp: int | None
    is_redeemed: bool
    redeemed_at: int | None
    created_at: datetime
    updated_at: datetime
