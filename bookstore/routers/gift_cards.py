# bookstore/routers/gift_cards.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from bookstore.core.auth import get_actor, require_admin, require_auth
from bookstore.core.config import get_settings
from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.repositories.gift_card_repo import GiftCardRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.gift_card import GiftCardCreate, GiftCardRead, GiftCardUpdate
from bookstore.schemas.user import Actor
from bookstore.services.gift_card_service import GiftCardService

router = APIRouter(prefix="/gift-cards", tags=["Gift cards"])
admin_router = APIRouter(prefix="/admin/gift-cards", tags=["Admin: gift cards"])

service = GiftCardService(GiftCardRepository(), UserRepository(), get_settings())


# -------- Any authenticated account --------


@router.post("", response_model=GiftCardRead, status_code=status.HTTP_201_CREATED)
def create_gift_card(
    payload: GiftCardCreate,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    """
    Issue a gift card to another user.

    The issuer is the caller; the card expires after
    GIFT_CARD_EXPIRY_DAYS.
    """
    return service.create(session, actor, payload)


@router.get("", response_model=list[GiftCardRead])
def list_my_gift_cards(
    tag: str | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Cards received by the caller, or cards they issued with `?tag=Issue`.
    """
    return service.list_for_user(session, current_user.id, tag)


@router.get("/active", response_model=list[GiftCardRead])
def list_my_active_gift_cards(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Received cards that are neither redeemed nor expired."""
    return service.list_active_for_user(session, current_user.id)


# -------- Admin --------


@admin_router.get(
    "",
    response_model=list[GiftCardRead],
    dependencies=[Depends(require_admin)],
)
def list_gift_cards(session: Session = Depends(get_session)):
    return service.list_all(session)


@admin_router.get(
    "/{gift_card_id}",
    response_model=GiftCardRead,
    dependencies=[Depends(require_admin)],
)
def get_gift_card(
    gift_card_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get(session, gift_card_id)


@admin_router.patch(
    "/{gift_card_id}",
    response_model=GiftCardRead,
    dependencies=[Depends(require_admin)],
)
def update_gift_card(
    gift_card_id: uuid.UUID,
    payload: GiftCardUpdate,
    session: Session = Depends(get_session),
):
    return service.update(session, gift_card_id, payload)


@admin_router.delete("/{gift_card_id}", response_model=GiftCardRead)
def delete_gift_card(
    gift_card_id: uuid.UUID,
    session: Session = Depends(get_session),
    actor: Actor = Depends(require_admin),
):
    return service.soft_delete(session, actor, gift_card_id)
