"""
Jotter Backend: Auth Service (Registration & Login Orchestrator)
=================================================================

What:  Coordinates the hasher, the credential store, and the token service.
Who:   Called by the /register and /login route handlers.

Registration Flow (POST /register):
    ┌──────────┐    ┌──────────────┐    ┌─────────────────┐
    │ Validate │───▶│ bcrypt hash  │───▶│ INSERT users    │
    │ fields   │    │ (threadpool) │    │ (unique check)  │
    └──────────┘    └──────────────┘    └─────────────────┘

Login Flow (POST /login):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│ SELECT user  │───▶│ bcrypt check │───▶│ sign JWT │
    │ fields   │    │ by username  │    │ (threadpool) │    │          │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Unknown user → NotFoundError (404); wrong password → AuthenticationError
    (401). Both responses share the same error body shape.

The steps of each flow run strictly in order: a token is never issued before
the password check has returned True.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from jotter.exceptions import AuthenticationError, NotFoundError, ValidationError
from jotter.services.credential_store import CredentialStore, credential_store
from jotter.services.password_hasher import PasswordHasher
from jotter.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration and login business logic.

    Holds the process-wide hasher and token service (both read-only after
    construction); the database session arrives with each call.
    """

    def __init__(
        self,
        hasher: PasswordHasher,
        tokens: TokenService,
        store: Optional[CredentialStore] = None,
    ):
        self.hasher = hasher
        self.tokens = tokens
        self.store = store or credential_store

    @staticmethod
    def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
        # Empty strings count as missing
        if not username or not password:
            raise ValidationError(message="Missing fields")

    async def register(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> int:
        """
        Create an account and return the new user id.

        Raises:
            ValidationError: username or password missing/empty, or the
                password exceeds bcrypt's 72-byte input limit (→ 400)
            HashingError: bcrypt failed (→ 500)
            DuplicateUsernameError: username taken (→ 400)
            StorageError: database failure (→ 500)
        """
        self._require_credentials(username, password)
        if self.hasher.exceeds_limit(password):
            raise ValidationError(message="Password is too long", field="password")

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        return await self.store.create(db, username, password_hash)

    async def login(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and return a fresh bearer token.

        Raises:
            ValidationError: username or password missing/empty (→ 400)
            NotFoundError: no user with this username (→ 404)
            AuthenticationError: password does not match (→ 401)
            HashingError: stored hash unreadable (→ 500)
            StorageError: database failure (→ 500)
        """
        self._require_credentials(username, password)

        user = await self.store.find_by_username(db, username)
        if user is None:
            raise NotFoundError(resource="user")

        matches = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not matches:
            logger.info("Login failed for user %d: invalid credentials", user.id)
            raise AuthenticationError()

        logger.info("User %d logged in", user.id)
        return self.tokens.issue(user.id)
