# bookstore/services/gift_card_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from bookstore.core.clock import millis_after_days, now_millis
from bookstore.core.config import Settings
from bookstore.core.errors import NotFoundError
from bookstore.models.common import RecordStatus
from bookstore.models.gift_card import GiftCard
from bookstore.repositories.gift_card_repo import GiftCardRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.gift_card import GiftCardCreate, GiftCardUpdate
from bookstore.schemas.user import Actor

logger = logging.getLogger(__name__)

# `tag` value selecting the cards a user issued rather than received
ISSUED_TAG = "Issue"


class GiftCardService:
    """
    Business logic for gift cards.

    Any authenticated actor may issue a card to an existing user.
    Admins can list, edit and soft-delete every card.
    """

    def __init__(
        self,
        gift_card_repo: GiftCardRepository,
        user_repo: UserRepository,
        settings: Settings,
    ):
        self.gift_card_repo = gift_card_repo
        self.user_repo = user_repo
        self.settings = settings

    def _get_or_404(self, session: Session, gift_card_id: uuid.UUID) -> GiftCard:
        gift_card = self.gift_card_repo.get_by_id(session, gift_card_id)
        if not gift_card:
            raise NotFoundError("Gift Card not found")
        return gift_card

    def _ensure_recipient(self, session: Session, recipient_id: uuid.UUID) -> None:
        if not self.user_repo.get_by_id(session, recipient_id):
            raise NotFoundError("Recipient not found")

    # ---- user operations ----

    def create(
        self,
        session: Session,
        actor: Actor,
        payload: GiftCardCreate,
    ) -> GiftCard:
        """
        Issue a gift card.

        Rules:
          - issuer is the acting user/admin (by id) or super admin (by email)
          - non super-admin issuers must exist
          - recipient must exist
          - expires GIFT_CARD_EXPIRY_DAYS from now
        """
        if actor.role != "SuperAdmin":
            if not actor.id or not self.user_repo.get_by_id(session, actor.id):
                raise NotFoundError("Issuer not found")

        self._ensure_recipient(session, payload.recipient_id)

        gift_card = GiftCard(
            **payload.model_dump(),
            issuer_type=actor.role,
            issuer_id=actor.id if actor.role != "SuperAdmin" else None,
            issuer_email=actor.email if actor.role == "SuperAdmin" else None,
            expiry_timestamp=millis_after_days(self.settings.GIFT_CARD_EXPIRY_DAYS),
        )
        gift_card = self.gift_card_repo.save(session, gift_card)

        logger.info(
            "Gift card %s issued by %s to %s",
            gift_card.id,
            actor.role,
            gift_card.recipient_id,
        )
        return gift_card

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        tag: str | None = None,
    ) -> list[GiftCard]:
        if tag == ISSUED_TAG:
            return self.gift_card_repo.list_issued(session, user_id)
        return self.gift_card_repo.list_received(session, user_id)

    def list_active_for_user(self, session: Session, user_id: uuid.UUID) -> list[GiftCard]:
        return self.gift_card_repo.list_usable(session, user_id, now_millis())

    # ---- admin operations ----

    def list_all(self, session: Session) -> list[GiftCard]:
        return self.gift_card_repo.list_all(session)

    def get(self, session: Session, gift_card_id: uuid.UUID) -> GiftCard:
        return self._get_or_404(session, gift_card_id)

    def update(
        self,
        session: Session,
        gift_card_id: uuid.UUID,
        payload: GiftCardUpdate,
    ) -> GiftCard:
        """
        Partial update. `expiry_days` restarts the lifetime from now.
        """
        data = payload.model_dump(exclude_unset=True)

        if data.get("recipient_id") is not None:
            self._ensure_recipient(session, data["recipient_id"])

        gift_card = self._get_or_404(session, gift_card_id)

        expiry_days = data.pop("expiry_days", None)
        if expiry_days:
            gift_card.expiry_timestamp = millis_after_days(expiry_days)

        for key, value in data.items():
            if value is not None:
                setattr(gift_card, key, value)

        gift_card.updated_at = datetime.now(timezone.utc)
        return self.gift_card_repo.save(session, gift_card)

    def soft_delete(
        self,
        session: Session,
        actor: Actor,
        gift_card_id: uuid.UUID,
    ) -> GiftCard:
        gift_card = self._get_or_404(session, gift_card_id)

        gift_card.status = RecordStatus.DELETED
        gift_card.deleted_by_role = actor.role
        gift_card.deleted_by_id = actor.id if actor.role != "SuperAdmin" else None
        gift_card.deleted_by_email = actor.email if actor.role == "SuperAdmin" else None
        gift_card.updated_at = datetime.now(timezone.utc)

        gift_card = self.gift_card_repo.save(session, gift_card)
        logger.info("Gift card %s deleted by %s", gift_card.id, actor.role)
        return gift_card
