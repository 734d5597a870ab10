"""
Jotter Backend: Password Hasher
================================

What:  One-way adaptive hashing of passwords with bcrypt, plus verification.
How:   bcrypt.gensalt(rounds) produces a random salt tagged with the cost
       factor; hashpw embeds both in its 60-character output, so verify()
       needs nothing but the stored string.
Who:   Used by AuthService for registration (hash) and login (verify).

Threading:
    Both operations are CPU-bound (~50ms at cost 10). The methods here are
    synchronous; AuthService calls them through run_in_threadpool so a slow
    hash never stalls other requests on the event loop.

Input limit:
    bcrypt only reads the first 72 bytes of a password, and bcrypt>=5
    refuses longer input outright. Registration rejects such passwords up
    front (see `exceeds_limit`), and verify() answers False for them.
"""

import logging

import bcrypt

from jotter.exceptions import HashingError

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    bcrypt wrapper with a fixed cost factor.

    Args:
        rounds: log2 of the key-expansion iterations (BCRYPT_ROUNDS, default 10)
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    @staticmethod
    def exceeds_limit(plaintext: str) -> bool:
        return len(plaintext.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Returns:
            The bcrypt string, e.g. "$2b$10$<22-char salt><31-char digest>"

        Raises:
            HashingError: bcrypt failed (oversized input, resource exhaustion)
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")
        except (ValueError, TypeError, MemoryError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise HashingError(
                message="Error hashing password",
                context={"error_type": type(e).__name__},
            ) from e

    def verify(self, plaintext: str, hash_string: str) -> bool:
        """
        Check a plaintext password against a stored bcrypt hash.

        Returns:
            True on match, False on mismatch.

        Raises:
            HashingError: the stored hash is malformed (not a bcrypt string)
        """
        if self.exceeds_limit(plaintext):
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hash_string.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.error("Password verification failed on malformed hash: %s", type(e).__name__)
            raise HashingError(
                message="Error comparing passwords",
                context={"error_type": type(e).__name__},
            ) from e
