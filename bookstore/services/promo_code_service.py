# bookstore/services/promo_code_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from bookstore.core.errors import ConflictError, NotFoundError
from bookstore.models.common import RecordStatus
from bookstore.models.promo_code import PromoCode
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.promo_code import (
    Eligibility,
    PercentMaxValueTypeDetail,
    PercentTypeDetail,
    PromoCodeCreate,
    PromoCodeRead,
    PromoCodeUpdate,
    TypeDetail,
    ValueTypeDetail,
)
from bookstore.schemas.user import Actor

logger = logging.getLogger(__name__)


def to_promo_code_read(promo_code: PromoCode) -> PromoCodeRead:
    """Rebuild the nested eligibility / type_detail shape from the flat row."""
    if promo_code.discount_type == "value":
        type_detail = ValueTypeDetail(value=promo_code.value or 0)
    elif promo_code.discount_type == "percentage_with_max_value":
        type_detail = PercentMaxValueTypeDetail(
            percent=promo_code.percent,
            max_value=promo_code.max_value or 0,
        )
    else:
        type_detail = PercentTypeDetail(percent=promo_code.percent)

    return PromoCodeRead(
        id=promo_code.id,
        name=promo_code.name,
        description=promo_code.description,
        usage_limit=promo_code.usage_limit,
        eligibility=Eligibility(
            category_ids=promo_code.eligible_category_ids or [],
            author_ids=promo_code.eligible_author_ids or [],
            min_value=promo_code.min_value,
            min_item_count=promo_code.min_item_count,
        ),
        type_detail=type_detail,
        expiry_timestamp=promo_code.expiry_timestamp,
        currency_code=promo_code.currency_code,
        issuer_type=promo_code.issuer_type,
        issuer_id=promo_code.issuer_id,
        issuer_email=promo_code.issuer_email,
        usages=promo_code.usages or [],
        status=promo_code.status,
        created_at=promo_code.created_at,
        updated_at=promo_code.updated_at,
    )


def _apply_eligibility(promo_code: PromoCode, eligibility: Eligibility) -> None:
    promo_code.eligible_category_ids = [str(i) for i in eligibility.category_ids]
    promo_code.eligible_author_ids = [str(i) for i in eligibility.author_ids]
    promo_code.min_value = eligibility.min_value
    promo_code.min_item_count = eligibility.min_item_count


def _apply_type_detail(promo_code: PromoCode, type_detail: TypeDetail) -> None:
    promo_code.discount_type = type_detail.type
    promo_code.value = getattr(type_detail, "value", None)
    promo_code.percent = getattr(type_detail, "percent", None)
    promo_code.max_value = getattr(type_detail, "max_value", None)


class PromoCodeService:
    """
    Admin management of promo codes.

    Promo codes are never hard-deleted; deletion flips status to DELETED
    and records who did it. Usage counts are only ever read.
    """

    def __init__(self, promo_code_repo: PromoCodeRepository, user_repo: UserRepository):
        self.promo_code_repo = promo_code_repo
        self.user_repo = user_repo

    def _get_or_404(self, session: Session, promo_code_id: uuid.UUID) -> PromoCode:
        promo_code = self.promo_code_repo.get_by_id(session, promo_code_id)
        if not promo_code:
            raise NotFoundError("Promo Code not found")
        return promo_code

    def _ensure_unique_name(
        self,
        session: Session,
        name: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.promo_code_repo.get_by_name(session, name)
        if existing and existing.id != exclude_id:
            raise ConflictError("Promo code name already exists")

    def create(
        self,
        session: Session,
        actor: Actor,
        payload: PromoCodeCreate,
    ) -> PromoCodeRead:
        """
        Create a promo code issued by the acting admin / super admin.

        Rules:
          - name is unique
          - an Admin issuer must still exist; SuperAdmins are recorded
            by email only
        """
        if actor.role == "Admin":
            if not actor.id or not self.user_repo.get_by_id(session, actor.id):
                raise NotFoundError("Admin not found")

        self._ensure_unique_name(session, payload.name)

        promo_code = PromoCode(
            name=payload.name,
            description=payload.description,
            usage_limit=payload.usage_limit,
            discount_type=payload.type_detail.type,
            expiry_timestamp=payload.expiry_timestamp,
            currency_code=payload.currency_code,
            issuer_type=actor.role,
            issuer_id=actor.id if actor.role != "SuperAdmin" else None,
            issuer_email=actor.email if actor.role == "SuperAdmin" else None,
        )
        _apply_type_detail(promo_code, payload.type_detail)
        if payload.eligibility is not None:
            _apply_eligibility(promo_code, payload.eligibility)

        promo_code = self.promo_code_repo.save(session, promo_code)
        logger.info("Promo code %s created by %s", promo_code.name, actor.role)
        return to_promo_code_read(promo_code)

    def update(
        self,
        session: Session,
        promo_code_id: uuid.UUID,
        payload: PromoCodeUpdate,
    ) -> PromoCodeRead:
        promo_code = self._get_or_404(session, promo_code_id)

        data = payload.model_dump(exclude_unset=True)

        if "name" in data and data["name"] is not None:
            self._ensure_unique_name(session, data["name"], exclude_id=promo_code.id)
            promo_code.name = data["name"]

        for field in ("description", "usage_limit", "expiry_timestamp"):
            if field in data:
                setattr(promo_code, field, data[field])

        if data.get("currency_code") is not None:
            promo_code.currency_code = data["currency_code"]

        # Explicit null clears every eligibility criterion
        if "eligibility" in data:
            _apply_eligibility(promo_code, payload.eligibility or Eligibility())
        if payload.type_detail is not None:
            _apply_type_detail(promo_code, payload.type_detail)

        promo_code.updated_at = datetime.now(timezone.utc)
        promo_code = self.promo_code_repo.save(session, promo_code)
        return to_promo_code_read(promo_code)

    def list_all(self, session: Session) -> list[PromoCodeRead]:
        return [to_promo_code_read(p) for p in self.promo_code_repo.list_all(session)]

    def get(self, session: Session, promo_code_id: uuid.UUID) -> PromoCodeRead:
        return to_promo_code_read(self._get_or_404(session, promo_code_id))

    def soft_delete(
        self,
        session: Session,
        actor: Actor,
        promo_code_id: uuid.UUID,
    ) -> PromoCodeRead:
        promo_code = self._get_or_404(session, promo_code_id)

        promo_code.status = RecordStatus.DELETED
        promo_code.deleted_by_role = actor.role
        promo_code.deleted_by_id = actor.id if actor.role != "SuperAdmin" else None
        promo_code.deleted_by_email = actor.email if actor.role == "SuperAdmin" else None
        promo_code.updated_at = datetime.now(timezone.utc)

        promo_code = self.promo_code_repo.save(session, promo_code)
        logger.info("Promo code %s deleted by %s", promo_code.name, actor.role)
        return to_promo_code_read(promo_code)
