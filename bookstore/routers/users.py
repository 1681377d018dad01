# bookstore/routers/users.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from bookstore.core.auth import require_admin, require_auth
from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.repositories.user_repo import UserRepository
from bookstore.routers.cart import service as cart_service
from bookstore.schemas.cart import AddressCreate, AddressRead
from bookstore.schemas.user import UserRead, UserRoleUpdate, UserUpdate
from bookstore.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The row is auto-created on the first authenticated request.
    """
    return service.get_me(current_user)


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Currently, only `name` is editable.
    """
    return service.update_me(session, current_user, payload)


@router.post(
    "/me/addresses",
    response_model=AddressRead,
    status_code=status.HTTP_201_CREATED,
)
def create_address(
    payload: AddressCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a delivery address. Its id can then be set on the cart.
    """
    return cart_service.create_address(session, current_user.id, payload)


@router.get("/me/addresses", response_model=list[AddressRead])
def list_addresses(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return cart_service.list_addresses(session, current_user.id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all users (admin only).

    Pagination via skip/limit.
    """
    return service.list_users(session, skip, limit)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_user(session, user_id)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only).

    Allowed roles: user, admin. Super admins come from configuration.
    """
    return service.update_role(session, user_id, payload)
