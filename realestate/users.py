"""
User accounts: bcrypt password hashing and the account service.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

import bcrypt

from realestate.errors import DuplicateUserError, InvalidCredentialsError
from realestate.models import User, UserRole
from realestate.repository import UserRepository

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    def create_user(self, user: User) -> str:
        """Rejects a taken email before anything is written."""
        if self.repository.find_by_email(user.email) is not None:
            raise DuplicateUserError(user.email)
        now = datetime.now(timezone.utc)
        user.password = hash_password(user.password or "")
        user.role = UserRole.parse(user.role).value
        if user.enabled is None:
            user.enabled = True
        user.created_at = now
        user.updated_at = now
        user_id = self.repository.save(user)
        logger.info("Created user %s with role %s", user.email, user.role)
        return user_id

    def update_user(self, user_id: str, user: User) -> None:
        if user.email is not None:
            existing = self.repository.find_by_email(user.email)
            if existing is not None and existing.id != user_id:
                raise DuplicateUserError(user.email)
        if user.password and user.password.strip():
            user.password = hash_password(user.password)
        else:
            user.password = None
        if user.role is not None:
            user.role = UserRole.parse(user.role).value
        user.updated_at = datetime.now(timezone.utc)
        self.repository.update(user_id, user)

    def delete_user(self, user_id: str) -> None:
        self.repository.delete(user_id)

    def get_user(self, user_id: str) -> Optional[User]:
        return self.repository.find_by_id(user_id)

    def get_all_users(self) -> List[User]:
        return self.repository.find_all()

    def load_by_email(self, email: str) -> Optional[User]:
        return self.repository.find_by_email(email)

    def authenticate(self, email: str, password: str) -> User:
        user = self.repository.find_by_email(email)
        if user is None or not user.enabled:
            raise InvalidCredentialsError()
        if not verify_password(password, user.password):
            raise InvalidCredentialsError()
        return user
