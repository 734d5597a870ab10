"""
Jotter Backend: Auth Gate
==========================

What:  Guards every /notes route. Resolves the bearer token on the request
       into a user id or rejects the request before the handler runs.
How:   A FastAPI dependency (callable instance) rather than a Starlette
       middleware, so only protected routes pay for it and the handler
       receives the user id as an ordinary argument.

State machine (per request):
    Start
      │  read Authorization header ("<scheme> <token>")
      ├── header absent or empty ─────────────▶ Rejected(missing)  401
      │  token = second whitespace-separated segment (scheme not checked)
      ├── TokenService.verify(token) is None ─▶ Rejected(invalid)  403
      └── otherwise ──────────────────────────▶ Authenticated
                                                request.state.user_id = id

Usage:
    @router.get("/notes")
    async def list_notes(user_id: int = Depends(require_user)):
        ...
"""

import logging
from typing import Optional

from fastapi import Request

from jotter.exceptions import InvalidTokenError, MissingTokenError
from jotter.services.token_service import TokenService

logger = logging.getLogger(__name__)


def extract_token(authorization: str) -> Optional[str]:
    """Return the second whitespace-separated segment of the header, if any."""
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]


class AuthGate:
    """
    Bearer token dependency.

    The TokenService is read from `request.app.state.token_service`, which
    create_app() builds once from the configured secret.
    """

    async def __call__(self, request: Request) -> int:
        authorization = request.headers.get("Authorization")
        if not authorization:
            raise MissingTokenError()

        token_service: TokenService = request.app.state.token_service
        user_id = token_service.verify(extract_token(authorization))
        if user_id is None:
            logger.info("Rejected request to %s: invalid token", request.url.path)
            raise InvalidTokenError()

        request.state.user_id = user_id
        return user_id


require_user = AuthGate()
