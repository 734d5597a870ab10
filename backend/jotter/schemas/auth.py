"""
Jotter Backend: Authentication Schemas
=======================================

What:  Request/response bodies for POST /register and POST /login.

Why the request fields are Optional:
    A missing username or password must come back as 400 "Missing fields"
    (the same as an empty string), not as FastAPI's automatic 422. The
    AuthService performs the presence check and raises ValidationError.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Body shared by register and login: {"username": ..., "password": ...}."""

    username: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Case-sensitive login name",
    )
    password: Optional[str] = Field(
        default=None,
        description="Plaintext password (never stored or logged)",
    )


class TokenResponse(BaseModel):
    """Returned by POST /login with HTTP 200."""

    token: str = Field(description="Signed bearer token, valid for one hour")
