# bookstore/repositories/gift_card_repo.py
import uuid

from sqlmodel import Session, select

from bookstore.models.common import RecordStatus
from bookstore.models.gift_card import GiftCard


class GiftCardRepository:

    def get_by_id(self, session: Session, gift_card_id: uuid.UUID) -> GiftCard | None:
        return session.get(GiftCard, gift_card_id)

    def get_active(self, session: Session, gift_card_id: uuid.UUID) -> GiftCard | None:
        stmt = select(GiftCard).where(
            GiftCard.id == gift_card_id,
            GiftCard.status == RecordStatus.ACTIVE,
        )
        return session.exec(stmt).first()

    def list_all(self, session: Session) -> list[GiftCard]:
        stmt = select(GiftCard).order_by(GiftCard.created_at.desc())
        return list(session.exec(stmt).all())

    def list_received(self, session: Session, user_id: uuid.UUID) -> list[GiftCard]:
        stmt = (
            select(GiftCard)
            .where(GiftCard.recipient_id == user_id)
            .order_by(GiftCard.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_issued(self, session: Session, user_id: uuid.UUID) -> list[GiftCard]:
        stmt = (
            select(GiftCard)
            .where(GiftCard.issuer_id == user_id)
            .order_by(GiftCard.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_usable(
        self,
        session: Session,
        user_id: uuid.UUID,
        now_ms: int,
    ) -> list[GiftCard]:
        """Received cards that are neither redeemed nor expired."""
        stmt = (
            select(GiftCard)
            .where(
                GiftCard.recipient_id == user_id,
                GiftCard.is_redeemed == False,  # noqa: E712
                GiftCard.expiry_timestamp > now_ms,
            )
            .order_by(GiftCard.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def save(self, session: Session, gift_card: GiftCard) -> GiftCard:
        session.add(gift_card)
        session.commit()
        session.refresh(gift_card)
        return gift_card
