# bookstore/models/catalog.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

from bookstore.models.common import RecordStatus


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )
    name: str = Field(max_length=100, index=True)
    description: str | None = None


class Author(SQLModel, table=True):
    __tablename__ = "authors"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )
    first_name: str = Field(max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(default="", max_length=100)


class Edition(SQLModel, table=True):
    __tablename__ = "editions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )
    name: str = Field(max_length=100)
    description: str | None = None


class Book(SQLModel, table=True):
    """
    Catalog entry. Read-only input to cart pricing:
    price, category, author and the per-cart quantity cap.
    """

    __tablename__ = "books"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(max_length=255, index=True)

    short_description: str | None = None
    long_description: str | None = None

    # A book without a price contributes nothing to the cart total
    price: float | None = Field(
        default=None,
        ge=0,
        description="Unit price in the store currency",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    author_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="authors.id",
        index=True,
    )

    edition_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="editions.id",
    )

    pages: int | None = Field(default=None, ge=0)

    max_quantity: int | None = Field(
        default=None,
        gt=0,
        description="Maximum copies a single cart may hold",
    )

    status: int = Field(
        default=RecordStatus.ACTIVE,
        index=True,
        description="0 deleted | 1 active | 2 archived",
    )

    # Who soft-deleted the book: Admin | SuperAdmin
    deleted_by_role: str | None = None
    deleted_by_id: uuid.UUID | None = None
    deleted_by_email: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
