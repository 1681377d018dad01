# bookstore/schemas/promo_code.py
import uuid
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.pricing import EligibilityReport

CurrencyCode = Literal["INR", "USD", "CAD", "EUR"]


# ---- Discount rule (tagged on `type`) ----


class ValueTypeDetail(BaseModel):
    type: Literal["value"] = "value"
    value: float = Field(ge=0)


class PercentTypeDetail(BaseModel):
    type: Literal["percent"] = "percent"
    percent: float = Field(gt=0, le=100)


class PercentMaxValueTypeDetail(BaseModel):
    type: Literal["percentage_with_max_value"] = "percentage_with_max_value"
    percent: float = Field(gt=0, le=100)
    max_value: float = Field(ge=0)


TypeDetail = Annotated[
    Union[ValueTypeDetail, PercentTypeDetail, PercentMaxValueTypeDetail],
    Field(discriminator="type"),
]


class Eligibility(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category_ids: list[uuid.UUID] = []
    author_ids: list[uuid.UUID] = []
    min_value: float | None = Field(default=None, ge=0)
    min_item_count: int | None = Field(default=None, ge=0)


class Usage(BaseModel):
    user_id: uuid.UUID
    count: int = 0


# ---- Admin payloads ----


class PromoCodeCreate(BaseModel):
    """
    Payload for creating a promo code (admin / super admin).

    The issuer is taken from the authenticated actor, never from the body.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None
    usage_limit: int | None = Field(default=None, gt=0)
    eligibility: Eligibility | None = None
    type_detail: TypeDetail
    expiry_timestamp: int | None = Field(default=None, description="Epoch millis")
    currency_code: CurrencyCode = "INR"

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class PromoCodeUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    usage_limit: int | None = Field(default=None, gt=0)
    eligibility: Eligibility | None = None
    type_detail: TypeDetail | None = None
    expiry_timestamp: int | None = None
    currency_code: CurrencyCode | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


# ---- Read models ----


class PromoCodeRead(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    usage_limit: int | None
    eligibility: Eligibility
    type_detail: TypeDetail
    expiry_timestamp: int | None
    currency_code: str
    issuer_type: str
    issuer_id: uuid.UUID | None
    issuer_email: str | None
    usages: list[Usage]
    status: int
    created_at: datetime
    updated_at: datetime


class PromoCodeSuggestion(PromoCodeRead):
    """
    Promo code returned by the suggestion endpoint.

    Applicable codes carry `details`; the others carry a single
    human-readable `message`.
    """

    is_applicable: bool
    details: EligibilityReport | None = None
    message: str | None = None
