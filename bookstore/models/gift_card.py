# bookstore/models/gift_card.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

from bookstore.models.common import DEFAULT_CURRENCY, RecordStatus


class GiftCard(SQLModel, table=True):
    """
    Fixed-amount credit issued to a recipient.

    Issuer:
      - issuer_type: "User" | "Admin" | "SuperAdmin"
      - issuer_id for users/admins, issuer_email for super admins

    A redeemed or expired card contributes nothing to pricing and
    cannot be applied to a cart.
    """

    __tablename__ = "gift_cards"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100)
    description: str | None = None

    amount: float = Field(ge=0)

    issuer_type: str = Field(description="User | Admin | SuperAdmin")
    issuer_id: uuid.UUID | None = Field(default=None, index=True)
    issuer_email: str | None = None

    recipient_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    currency_code: str = Field(default=DEFAULT_CURRENCY)

    status: int = Field(
        default=RecordStatus.ACTIVE,
        index=True,
        description="0 deleted | 1 active | 2 archived",
    )

    expiry_timestamp: int | None = Field(
        default=None,
        description="Epoch millis after which the card is void",
    )

    is_redeemed: bool = Field(default=False)
    redeemed_at: int | None = Field(default=None, description="Epoch millis")

    deleted_by_role: str | None = None
    deleted_by_id: uuid.UUID | None = None
    deleted_by_email: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
