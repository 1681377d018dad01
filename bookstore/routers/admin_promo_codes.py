# bookstore/routers/admin_promo_codes.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from bookstore.core.auth import require_admin
from bookstore.database import get_session
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.promo_code import PromoCodeCreate, PromoCodeRead, PromoCodeUpdate
from bookstore.schemas.user import Actor
from bookstore.services.promo_code_service import PromoCodeService

router = APIRouter(prefix="/admin/promo-codes", tags=["Admin: promo codes"])

service = PromoCodeService(PromoCodeRepository(), UserRepository())


@router.post("", response_model=PromoCodeRead, status_code=status.HTTP_201_CREATED)
def create_promo_code(
    payload: PromoCodeCreate,
    session: Session = Depends(get_session),
    actor: Actor = Depends(require_admin),
):
    """
    Create a promo code. The issuer is the calling admin / super admin.
    """
    return service.create(session, actor, payload)


@router.get(
    "",
    response_model=list[PromoCodeRead],
    dependencies=[Depends(require_admin)],
)
def list_promo_codes(session: Session = Depends(get_session)):
    return service.list_all(session)


@router.get(
    "/{promo_code_id}",
    response_model=PromoCodeRead,
    dependencies=[Depends(require_admin)],
)
def get_promo_code(
    promo_code_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get(session, promo_code_id)


@router.patch(
    "/{promo_code_id}",
    response_model=PromoCodeRead,
    dependencies=[Depends(require_admin)],
)
def update_promo_code(
    promo_code_id: uuid.UUID,
    payload: PromoCodeUpdate,
    session: Session = Depends(get_session),
):
    return service.update(session, promo_code_id, payload)


@router.delete("/{promo_code_id}", response_model=PromoCodeRead)
def delete_promo_code(
    promo_code_id: uuid.UUID,
    session: Session = Depends(get_session),
    actor: Actor = Depends(require_admin),
):
    """Soft delete: status becomes DELETED, the row stays."""
    return service.soft_delete(session, actor, promo_code_id)
