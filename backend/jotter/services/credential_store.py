"""
Jotter Backend: Credential Store
=================================

What:  Persists (username, password_hash) pairs and looks them up by name.
Who:   Called by AuthService; the only module that reads or writes `users`.

Uniqueness:
    create() issues a single INSERT and lets the UNIQUE constraint on
    users.username decide. There is no "does this name exist?" query first,
    so two concurrent registrations of the same name produce exactly one row;
    the loser's IntegrityError becomes DuplicateUsernameError after rollback.

No update or delete operations are exposed.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import DuplicateUsernameError, StorageError
from jotter.models.user import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """Stateless data access for the users table; one session per call."""

    async def create(self, db: AsyncSession, username: str, password_hash: str) -> int:
        """
        Insert a new user and return its id.

        Raises:
            DuplicateUsernameError: username is already taken (→ 400)
            StorageError: any other database failure (→ 500)
        """
        user = User(username=username, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Registration rejected: username already exists")
            raise DuplicateUsernameError()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating user: %s", str(e))
            raise StorageError(context={"error_type": type(e).__name__})

        logger.info("User %d registered", user.id)
        return user.id

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        """
        Look up a user by exact (case-sensitive) username.

        Returns:
            The User row, or None when no such user exists.

        Raises:
            StorageError: query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise StorageError(context={"error_type": type(e).__name__})


# ── Singleton Instance ────────────────────────────────────────────────────
credential_store = CredentialStore()
