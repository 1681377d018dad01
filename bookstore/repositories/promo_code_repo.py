# bookstore/repositories/promo_code_repo.py
import uuid
from typing import Iterable

from sqlmodel import Session, select

from bookstore.models.common import RecordStatus
from bookstore.models.promo_code import PromoCode


class PromoCodeRepository:
    """
    Data access layer for promo codes.
    """

    def get_by_id(self, session: Session, promo_code_id: uuid.UUID) -> PromoCode | None:
        return session.get(PromoCode, promo_code_id)

    def get_active(self, session: Session, promo_code_id: uuid.UUID) -> PromoCode | None:
        stmt = select(PromoCode).where(
            PromoCode.id == promo_code_id,
            PromoCode.status == RecordStatus.ACTIVE,
        )
        return session.exec(stmt).first()

    def get_by_name(self, session: Session, name: str) -> PromoCode | None:
        stmt = select(PromoCode).where(PromoCode.name == name)
        return session.exec(stmt).first()

    def list_all(self, session: Session) -> list[PromoCode]:
        stmt = select(PromoCode).order_by(PromoCode.created_at.desc())
        return list(session.exec(stmt).all())

    def list_candidates(
        self,
        session: Session,
        category_ids: Iterable[str],
        author_ids: Iterable[str],
    ) -> list[PromoCode]:
        """
        Active promo codes that could apply to a cart holding the given
        categories and authors: either unscoped, or scoped to at least one
        of them.

        Scopes are JSON arrays, so the intersection is done here rather
        than in SQL.
        """
        categories = set(category_ids)
        authors = set(author_ids)

        stmt = (
            select(PromoCode)
            .where(PromoCode.status == RecordStatus.ACTIVE)
            .order_by(PromoCode.created_at)
        )
        candidates: list[PromoCode] = []
        for promo in session.exec(stmt).all():
            if not promo.has_eligibility_scope:
                candidates.append(promo)
            elif categories.intersection(promo.eligible_category_ids or []):
                candidates.append(promo)
            elif authors.intersection(promo.eligible_author_ids or []):
                candidates.append(promo)
        return candidates

    def save(self, session: Session, promo_code: PromoCode) -> PromoCode:
        session.add(promo_code)
        session.commit()
        session.refresh(promo_code)
        return promo_code
