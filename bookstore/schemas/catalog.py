# bookstore/schemas/catalog.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class BookCreate(SQLModel):
    """
    Payload for creating a book (admin only).
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=255)
    short_description: str | None = None
    long_description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category_id: uuid.UUID | None = None
    author_id: uuid.UUID | None = None
    edition_id: uuid.UUID | None = None
    pages: int | None = Field(default=None, ge=0)
    max_quantity: int | None = Field(default=None, gt=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class BookUpdate(SQLModel):
    """
    Partial update payload for books.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    short_description: str | None = None
    long_description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category_id: uuid.UUID | None = None
    author_id: uuid.UUID | None = None
    edition_id: uuid.UUID | None = None
    pages: int | None = Field(default=None, ge=0)
    max_quantity: int | None = Field(default=None, gt=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class BookRead(SQLModel):
    id: uuid.UUID
    title: str
    short_description: str | None
    long_description: str | None
    price: float | None
    category_id: uuid.UUID | None
    author_id: uuid.UUID | None
    edition_id: uuid.UUID | None
    pages: int | None
    max_quantity: int | None
    status: int
    created_at: datetime


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None


class AuthorCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(max_length=100)
    middle_name: str | None = None
    last_name: str = ""


class AuthorRead(SQLModel):
    id: uuid.UUID
    first_name: str
    middle_name: str | None
    last_name: str


class EditionCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None


class EditionRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
