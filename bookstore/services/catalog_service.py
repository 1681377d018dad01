# bookstore/services/catalog_service.py
import logging
import uuid

from sqlmodel import Session

from bookstore.core.errors import BadRequestError, NotFoundError
from bookstore.models.catalog import Author, Book, Category, Edition
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

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Business logic for books and their reference data.

    Responsibilities:
      - referenced category / author / edition must exist
      - books are soft-deleted or archived, never removed
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: BookRepository):
        self.repo = repo

    # ----- Helpers -----

    def _check_references(
        self,
        session: Session,
        category_id: uuid.UUID | None,
        author_id: uuid.UUID | None,
        edition_id: uuid.UUID | None,
    ) -> None:
        if category_id and not self.repo.get_category(session, category_id):
            raise NotFoundError("Category not found")
        if author_id and not self.repo.get_author(session, author_id):
            raise NotFoundError("Author not found")
        if edition_id and not self.repo.get_edition(session, edition_id):
            raise NotFoundError("Edition not found")

    # ----- Books -----

    def list_books(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
    ) -> list[Book]:
        return self.repo.list_books(session, skip=skip, limit=limit, only_active=only_active)

    def get_book(self, session: Session, book_id: uuid.UUID) -> Book:
        book = self.repo.get_by_id(session, book_id)
        if not book:
            raise NotFoundError("Book not found")
        return book

    def create_book(self, session: Session, payload: BookCreate) -> Book:
        self._check_references(
            session, payload.category_id, payload.author_id, payload.edition_id
        )
        book = Book(**payload.model_dump())
        book = self.repo.save(session, book)
        logger.info("Book %s created: %s", book.id, book.title)
        return book

    def update_book(
        self,
        session: Session,
        book_id: uuid.UUID,
        payload: BookUpdate,
    ) -> Book:
        """
        Partial update of a book. Fields left as None are untouched.
        """
        book = self.get_book(session, book_id)
        self._check_references(
            session, payload.category_id, payload.author_id, payload.edition_id
        )

        for key, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(book, key, value)

        return self.repo.save(session, book)

    def soft_delete_book(
        self,
        session: Session,
        actor: Actor,
        book_id: uuid.UUID,
    ) -> Book:
        book = self.get_book(session, book_id)

        book.status = RecordStatus.DELETED
        book.deleted_by_role = actor.role
        book.deleted_by_id = actor.id if actor.role != "SuperAdmin" else None
        book.deleted_by_email = actor.email if actor.role == "SuperAdmin" else None

        book = self.repo.save(session, book)
        logger.info("Book %s deleted by %s", book.id, actor.role)
        return book

    def archive_book(self, session: Session, book_id: uuid.UUID) -> Book:
        """
        Take a book off sale. Only active books can be archived.
        """
        book = self.get_book(session, book_id)
        if book.status != RecordStatus.ACTIVE:
            raise BadRequestError("Only active books can be archived")

        book.status = RecordStatus.ARCHIVED
        return self.repo.save(session, book)

    # ----- Reference data -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        return self.repo.add(session, Category(**payload.model_dump()))

    def list_authors(self, session: Session) -> list[Author]:
        return self.repo.list_authors(session)

    def create_author(self, session: Session, payload: AuthorCreate) -> Author:
        return self.repo.add(session, Author(**payload.model_dump()))

    def list_editions(self, session: Session) -> list[Edition]:
        return self.repo.list_editions(session)

    def create_edition(self, session: Session, payload: EditionCreate) -> Edition:
        return self.repo.add(session, Edition(**payload.model_dump()))
