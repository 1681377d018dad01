# bookstore/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from bookstore.models.address import Address
from bookstore.models.user import User


class UserRepository:
    """
    Data access layer for users and their addresses.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        stmt = select(User).order_by(User.created_at).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def save(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    # ----- Addresses -----

    def get_address(self, session: Session, address_id: uuid.UUID) -> Address | None:
        return session.get(Address, address_id)

    def list_addresses(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        stmt = select(Address).where(Address.user_id == user_id)
        return list(session.exec(stmt).all())

    def add_address(self, session: Session, address: Address) -> Address:
        session.add(address)
        session.commit()
        session.refresh(address)
        return address
