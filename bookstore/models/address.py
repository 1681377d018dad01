# bookstore/models/address.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Address(SQLModel, table=True):
    """
    Delivery address owned by a user and referenced by their cart.
    """

    __tablename__ = "addresses"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    country: str
    recipient_name: str

    # [{"country_code": "+91", "phone_number": "..."}]
    phones: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    house_no: str
    city: str
    landmark: str | None = None
    pincode: int
    state: str

    # Home | Office | any custom label
    tag: str = Field(default="Home")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
