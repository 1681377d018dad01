# tests/conftest.py
import os
import uuid

# Settings are read at import time by bookstore.database / bookstore.core.auth
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SUPER_ADMIN_EMAILS", '["root@bookstore.test"]')

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bookstore.core.config import Settings
from bookstore.models.address import Address  # noqa: F401
from bookstore.models.cart import Cart, CartLine  # noqa: F401
from bookstore.models.catalog import Author, Book, Category
from bookstore.models.gift_card import GiftCard
from bookstore.models.promo_code import PromoCode
from bookstore.models.user import User
from bookstore.repositories.book_repo import BookRepository
from bookstore.repositories.cart_repo import CartRepository
from bookstore.repositories.gift_card_repo import GiftCardRepository
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.services.cart_service import CartService
from bookstore.services.pricing import CartPricingEngine


class StubRandom:
    """
    Deterministic RandomSource.

    Returns `values` in order (cycling), clamped below the requested bound.
    """

    def __init__(self, *values: int):
        self.values = list(values) or [0]
        self.calls: list[int] = []

    def next_int(self, bound: int) -> int:
        value = self.values[len(self.calls) % len(self.values)]
        self.calls.append(bound)
        return min(value, bound - 1)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        GST_PERCENT=18,
        DELIVERY_LEAD_DAYS=2,
        GIFT_CARD_EXPIRY_DAYS=365,
        SUPER_ADMIN_EMAILS=["root@bookstore.test"],
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def random_source() -> StubRandom:
    # handling fee 10, delivery 20, discount percent 0
    return StubRandom(10, 20, 0)


@pytest.fixture
def pricing(settings, random_source) -> CartPricingEngine:
    return CartPricingEngine(
        settings,
        GiftCardRepository(),
        PromoCodeRepository(),
        random_source,
    )


@pytest.fixture
def cart_service(settings, pricing) -> CartService:
    return CartService(
        CartRepository(),
        BookRepository(),
        UserRepository(),
        pricing,
        settings,
    )


# ---- seed helpers ----


def add(session: Session, row):
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def make_user(session: Session, email: str | None = None, role: str = "user") -> User:
    email = email or f"{uuid.uuid4().hex[:8]}@bookstore.test"
    return add(
        session,
        User(id=uuid.uuid4(), email=email, name=email.split("@")[0], role=role),
    )


def make_category(session: Session, name: str = "Fiction") -> Category:
    return add(session, Category(name=name))


def make_author(session: Session, first_name: str = "Jane") -> Author:
    return add(session, Author(first_name=first_name, last_name="Doe"))


def make_book(
    session: Session,
    price: float | None = 100,
    max_quantity: int | None = None,
    category: Category | None = None,
    author: Author | None = None,
    title: str = "A Book",
) -> Book:
    return add(
        session,
        Book(
            title=title,
            price=price,
            max_quantity=max_quantity,
            category_id=category.id if category else None,
            author_id=author.id if author else None,
        ),
    )


def make_promo(session: Session, **fields) -> PromoCode:
    data = {
        "name": f"PROMO-{uuid.uuid4().hex[:6]}",
        "discount_type": "value",
        "value": 50,
        "issuer_type": "SuperAdmin",
        "issuer_email": "root@bookstore.test",
    }
    data.update(fields)
    return add(session, PromoCode(**data))


def make_gift_card(session: Session, recipient: User, **fields) -> GiftCard:
    data = {
        "name": "Birthday",
        "amount": 200,
        "issuer_type": "SuperAdmin",
        "issuer_email": "root@bookstore.test",
        "recipient_id": recipient.id,
    }
    data.update(fields)
    return add(session, GiftCard(**data))
