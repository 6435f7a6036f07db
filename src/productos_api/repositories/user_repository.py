"""
User repository for handling user-specific database operations.

Extends BaseRepository with account lookup by email and credential matching.
Passwords are only ever compared against the stored bcrypt hash.
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from productos_api.core.security import hash_password, verify_password
from productos_api.models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """
    Repository for User entity operations (`CrudRepository[User]` +
    `CredentialLookup`).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, email: str, password: str, is_active: bool = True) -> User:
        """
        Stage a new user with a hashed password.

        Args:
            email: Login identifier (normalized to lowercase)
            password: Plain password; only its bcrypt hash is stored
            is_active: Whether the account may log in (default: True)

        Returns:
            The staged User; its id is assigned when the unit of work commits.

        Raises:
            DuplicateError: On commit, if the email is already registered.
        """
        normalized = normalize_email(email)
        # bcrypt is deliberately slow; keep it off the event loop
        hashed = await asyncio.to_thread(hash_password, password)
        user = User(email=normalized, hashed_password=hashed, is_active=is_active)
        logger.info("repo.user.create", extra={"email": normalized})
        return await self.add(user)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get a user by their email address (case-insensitive).
        """
        user = await self.find_by_field("email", normalize_email(email))
        logger.debug("repo.user.get_by_email", extra={"found": user is not None})
        return user

    async def get_by_credentials(self, email: str, password: str) -> User | None:
        """
        Return the active user whose email and password match, or None.

        An unknown email, a wrong password and an inactive account all return
        None, so callers cannot tell them apart.
        """
        user = await self.get_by_email(email)
        if user is None or not user.is_active:
            return None

        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            logger.debug("repo.user.password_mismatch", extra={"user_id": user.id})
            return None

        return user
