"""
Jotter Backend: Token Issuer / Verifier
========================================

What:  Issues and verifies signed, time-limited bearer tokens (JWT).
How:   python-jose signs the claims {sub, iat, exp} with HMAC using the
       process-wide secret; decode() checks the signature, the algorithm,
       and that `exp` lies in the future.
Who:   AuthService.login() issues; the AuthGate dependency verifies.

Token claims:
    sub  User id as a string (JWT requires a string subject)
    iat  Issue time (UTC)
    exp  iat + token lifetime (one hour by default)

Verification never raises. Every failure (malformed token, wrong key,
expired, unexpected algorithm, missing or non-numeric subject) returns None
so the caller cannot tell which check failed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class TokenService:
    """
    Stateless JWT issuer/verifier bound to one signing secret.

    Args:
        secret:    Symmetric signing key, fixed for the lifetime of the instance
        algorithm: HS256 (default), HS384 or HS512
        lifetime:  How long an issued token stays valid
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=1),
    ):
        if not secret:
            raise ValueError("A non-empty signing secret is required")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        """
        Create a token for `user_id` expiring `lifetime` after `now`.

        `now` defaults to the current UTC time; tests pass an earlier time to
        produce tokens that are already expired.
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Optional[int]:
        """
        Return the user id carried by a valid token, or None.
        """
        if not token:
            return None
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            return None

        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Token rejected: unusable subject claim")
            return None
