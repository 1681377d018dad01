# bookstore/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Customer or admin account.

    Identity:
      - id: matches the "sub" claim of the access token

    Role:
      - "user" | "admin"
      - SuperAdmins have no role of their own; they are configured by
        email in settings.SUPER_ADMIN_EMAILS.

    Passwords and token issuance live with the identity provider.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the access token subject",
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    # Application role
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
