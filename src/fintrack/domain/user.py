"""User domain service."""

import logging
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import User
from fintrack.domain.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing user profiles."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str, email: Optional[str] = None) -> int:
        """Create a user profile.

        Args:
            name: Unique profile name
            email: Optional email address

        Returns:
            User ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If a user with this name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("User name cannot be empty")
        if self.db.get_user_by_name(name) is not None:
            raise ConflictError(f"User with name '{name}' already exists")
        user_id = self.db.create_user(name=name, email=email)
        logger.info("Created user %s (%s)", user_id, name)
        return user_id

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get_user(user_id)

    def get_user_by_name(self, name: str) -> Optional[User]:
        return self.db.get_user_by_name(name.strip())

    def list_users(self) -> list[User]:
        return self.db.list_users()

    def get_or_create_user(self, name: str) -> User:
        """Return the named user, creating the profile on first use."""
        user = self.get_user_by_name(name)
        if user is None:
            user = self.db.get_user(self.create_user(name))
        return user
