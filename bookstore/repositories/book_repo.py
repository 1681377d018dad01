# bookstore/repositories/book_repo.py
import uuid
from typing import Iterable

from sqlmodel import Session, select

from bookstore.models.catalog import Author, Book, Category, Edition
from bookstore.models.common import RecordStatus


class BookRepository:
    """
    Data access layer for the catalog (books, categories, authors, editions).

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Books -----

    def get_by_id(self, session: Session, book_id: uuid.UUID) -> Book | None:
        return session.get(Book, book_id)

    def get_many(
        self,
        session: Session,
        book_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, Book]:
        ids = list(book_ids)
        if not ids:
            return {}
        stmt = select(Book).where(Book.id.in_(ids))
        return {book.id: book for book in session.exec(stmt).all()}

    def list_books(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
    ) -> list[Book]:
        stmt = select(Book)
        if only_active:
            stmt = stmt.where(Book.status == RecordStatus.ACTIVE)
        stmt = stmt.order_by(Book.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def save(self, session: Session, book: Book) -> Book:
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    # ----- Reference data -----

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_author(self, session: Session, author_id: uuid.UUID) -> Author | None:
        return session.get(Author, author_id)

    def get_edition(self, session: Session, edition_id: uuid.UUID) -> Edition | None:
        return session.get(Edition, edition_id)

    def list_categories(self, session: Session) -> list[Category]:
        return list(session.exec(select(Category).order_by(Category.name)).all())

    def list_authors(self, session: Session) -> list[Author]:
        return list(session.exec(select(Author).order_by(Author.last_name)).all())

    def list_editions(self, session: Session) -> list[Edition]:
        return list(session.exec(select(Edition).order_by(Edition.name)).all())

    def add(self, session: Session, row: Category | Author | Edition):
        session.add(row)
        session.commit()
        session.refresh(row)
        return row
