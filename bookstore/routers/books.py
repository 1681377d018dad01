# bookstore/routers/books.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from bookstore.core.auth import require_admin
from bookstore.database import get_session
from bookstore.repositories.book_repo import BookRepository
from bookstore.schemas.catalog import (
    AuthorCreate,
    AuthorRead,
    BookCreate,
    BookRead,
    BookUpdate,
    CategoryCreate,
    CategoryRead,
    EditionCreate,
    EditionRead,
)
from bookstore.schemas.user import Actor
from bookstore.services.catalog_service import CatalogService

router = APIRouter(tags=["Books"])

repo = BookRepository()
service = CatalogService(repo)


# -------- Public endpoints --------


@router.get("/books", response_model=list[BookRead])
def list_books(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    only_active: bool = True,
):
    """
    List books.

    - Public endpoint.
    - `only_active=True` hides deleted and archived books by default.
    """
    return service.list_books(session, skip=skip, limit=limit, only_active=only_active)


@router.get("/books/{book_id}", response_model=BookRead)
def get_book(
    book_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_book(session, book_id)


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    return service.list_categories(session)


@router.get("/authors", response_model=list[AuthorRead])
def list_authors(session: Session = Depends(get_session)):
    return service.list_authors(session)


@router.get("/editions", response_model=list[EditionRead])
def list_editions(session: Session = Depends(get_session)):
    return service.list_editions(session)


# -------- Admin endpoints --------


@router.post(
    "/books",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_book(
    payload: BookCreate,
    session: Session = Depends(get_session),
):
    return service.create_book(session, payload)


@router.patch(
    "/books/{book_id}",
    response_model=BookRead,
    dependencies=[Depends(require_admin)],
)
def update_book(
    book_id: uuid.UUID,
    payload: BookUpdate,
    session: Session = Depends(get_session),
):
    return service.update_book(session, book_id, payload)


@router.delete("/books/{book_id}", response_model=BookRead)
def delete_book(
    book_id: uuid.UUID,
    session: Session = Depends(get_session),
    actor: Actor = Depends(require_admin),
):
    """
    Soft delete: the book disappears from listings and can no longer be
    added to carts, but existing rows keep referencing it.
    """
    return service.soft_delete_book(session, actor, book_id)


@router.post(
    "/books/{book_id}/archive",
    response_model=BookRead,
    dependencies=[Depends(require_admin)],
)
def archive_book(
    book_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.archive_book(session, book_id)


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.post(
    "/authors",
    response_model=AuthorRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_author(
    payload: AuthorCreate,
    session: Session = Depends(get_session),
):
    return service.create_author(session, payload)


@router.post(
    "/editions",
    response_model=EditionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_edition(
    payload: EditionCreate,
    session: Session = Depends(get_session),
):
    return service.create_edition(session, payload)
