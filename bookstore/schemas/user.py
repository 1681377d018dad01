# bookstore/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# Stored roles. SuperAdmin comes from configuration, not from this column.
Role = Literal["user", "admin"]

# Who is acting on a request, as recorded on issued / deleted records
ActorRole = Literal["User", "Admin", "SuperAdmin"]


class Actor(SQLModel):
    """
    Authenticated caller.

    SuperAdmins are identified by email only; users and admins by id.
    """

    role: ActorRole
    id: uuid.UUID | None = None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ("Admin", "SuperAdmin")


class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    name: str
    role: Role
    created_at: datetime


class UserUpdate(SQLModel):
    """Only `name` is editable by the account owner."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserRoleUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    role: Role
