# bookstore/services/user_service.py
import logging
import uuid

from sqlmodel import Session

from bookstore.core.errors import NotFoundError
from bookstore.models.user import User
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.user import UserRoleUpdate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile edits by the account owner (name only)
      - admin listing and role changes
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self profile -----

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Currently, only `name` is editable.
        """
        if payload.name is not None:
            current_user.name = payload.name

        return self.repo.save(session, current_user)

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        return self.repo.list_users(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError: if no such user.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """Promote / demote a user. Role values are checked by the schema."""
        user = self.get_user(session, user_id)
        user.role = payload.role
        logger.info("User %s role set to %s", user.id, user.role)
        return self.repo.save(session, user)
