# bookstore/models/promo_code.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from bookstore.models.common import DEFAULT_CURRENCY, RecordStatus


class PromoCode(SQLModel, table=True):
    """
    Admin-issued discount code.

    Discount rule (discount_type):
      - "value": fixed `value`
      - "percent": `percent` of the matched amount
      - "percentage_with_max_value": `percent`, capped at `max_value`

    Eligibility (all optional):
      - eligible_category_ids / eligible_author_ids: list of UUID strings
      - min_value: minimum cart total
      - min_item_count: minimum number of copies in the cart

    usages: [{"user_id": "<uuid>", "count": <int>}]
    """

    __tablename__ = "promo_codes"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )
    description: str | None = None

    usage_limit: int | None = Field(default=None, gt=0)

    eligible_category_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    eligible_author_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    min_value: float | None = None
    min_item_count: int | None = None

    # value | percent | percentage_with_max_value
    discount_type: str
    value: float | None = None
    percent: float | None = None
    max_value: float | None = None

    expiry_timestamp: int | None = Field(
        default=None,
        description="Epoch millis after which the code is void",
    )

    currency_code: str = Field(default=DEFAULT_CURRENCY)

    issuer_type: str = Field(description="Admin | SuperAdmin")
    issuer_id: uuid.UUID | None = None
    issuer_email: str | None = None

    usages: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    status: int = Field(
        default=RecordStatus.ACTIVE,
        index=True,
        description="0 deleted | 1 active | 2 archived",
    )

    deleted_by_role: str | None = None
    deleted_by_id: uuid.UUID | None = None
    deleted_by_email: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def total_usage(self) -> int:
        return sum(int(u.get("count", 0)) for u in self.usages or [])

    @property
    def has_eligibility_scope(self) -> bool:
        return bool(self.eligible_category_ids or self.eligible_author_ids)
