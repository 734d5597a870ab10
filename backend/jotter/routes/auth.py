"""
Jotter Backend: Authentication Route Handlers
==============================================

What:  POST /register and POST /login.
How:   Parse the JSON body, delegate to AuthService, shape the response.
       Failures are raised as JotterError subclasses and formatted by the
       global exception handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.database import get_db_session
from jotter.schemas.auth import CredentialsRequest, TokenResponse
from jotter.schemas.common import ErrorResponse, MessageResponse
from jotter.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the AuthService built by create_app()."""
    return request.app.state.auth_service


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        201: {"description": "User registered", "model": MessageResponse},
        400: {
            "description": "Missing fields, username already exists, or password longer than 72 bytes (UTF-8)",
            "model": ErrorResponse,
        },
        500: {"description": "Hashing or database error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Create an account from {username, password}.

    The password is hashed with bcrypt before it reaches the database and is
    never echoed back or logged. bcrypt reads at most 72 bytes, so longer
    passwords are refused with 400 instead of being silently truncated.
    """
    await auth.register(db, payload.username, payload.password)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        200: {"description": "Bearer token issued", "model": TokenResponse},
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Hashing or database error", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    payload: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Exchange {username, password} for a token valid for one hour.

    Send it on protected routes as `Authorization: Bearer <token>`.
    """
    token = await auth.login(db, payload.username, payload.password)
    return TokenResponse(token=token)
