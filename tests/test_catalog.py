# tests/test_catalog.py
import uuid

import pytest

from bookstore.core.errors import BadRequestError, NotFoundError
from bookstore.models.common import RecordStatus
from bookstore.repositories.book_repo import BookRepository
from bookstore.schemas.catalog import (
    AuthorCreate,
    BookCreate,
    BookUpdate,
    CategoryCreate,
    EditionCreate,
)
from bookstore.schemas.user import Actor
from bookstore.services.catalog_service import CatalogService

from conftest import make_user


@pytest.fixture
def service() -> CatalogService:
    return CatalogService(BookRepository())


def test_create_book_with_references(session, service):
    category = service.create_category(session, CategoryCreate(name="Fiction"))
    author = service.create_author(session, AuthorCreate(first_name="Ursula", last_name="Le Guin"))
    edition = service.create_edition(session, EditionCreate(name="Paperback"))

    book = service.create_book(
        session,
        BookCreate(
            title=" The Dispossessed ",
            price=399,
            category_id=category.id,
            author_id=author.id,
            edition_id=edition.id,
            max_quantity=5,
        ),
    )

    assert book.title == "The Dispossessed"
    assert book.status == RecordStatus.ACTIVE
    assert [c.id for c in service.list_categories(session)] == [category.id]
    assert [a.id for a in service.list_authors(session)] == [author.id]
    assert [e.id for e in service.list_editions(session)] == [edition.id]


def test_unknown_reference_is_rejected(session, service):
    with pytest.raises(NotFoundError) as exc:
        service.create_book(session, BookCreate(title="Orphan", category_id=uuid.uuid4()))

    assert exc.value.detail == "Category not found"


def test_update_book_partial(session, service):
    book = service.create_book(session, BookCreate(title="Draft", price=100))

    updated = service.update_book(session, book.id, BookUpdate(price=120))

    assert updated.price == 120
    assert updated.title == "Draft"


def test_soft_deleted_and_archived_books_leave_the_listing(session, service):
    admin = make_user(session, role="admin")
    keep = service.create_book(session, BookCreate(title="Keep"))
    gone = service.create_book(session, BookCreate(title="Gone"))
    shelved = service.create_book(session, BookCreate(title="Shelved"))

    deleted = service.soft_delete_book(session, Actor(role="Admin", id=admin.id), gone.id)
    service.archive_book(session, shelved.id)

    assert deleted.status == RecordStatus.DELETED
    assert deleted.deleted_by_id == admin.id
    assert [b.id for b in service.list_books(session)] == [keep.id]
    assert len(service.list_books(session, only_active=False)) == 3


def test_archive_is_terminal(session, service):
    book = service.create_book(session, BookCreate(title="Old"))
    service.archive_book(session, book.id)

    with pytest.raises(BadRequestError):
        service.archive_book(session, book.id)


def test_get_unknown_book(session, service):
    with pytest.raises(NotFoundError):
        service.get_book(session, uuid.uuid4())
