"""
Jotter Backend: Notes Route Handlers
=====================================

What:  Create, list, update, and delete the caller's notes.
How:   Every handler depends on `require_user`, so the auth gate has resolved
       the caller's id (or rejected the request with 401/403) before the
       handler body runs. That id is the owner scope passed to NoteStore.

Endpoints:
    POST   /notes        → 201 {message, noteId}
    GET    /notes        → 200 {notes: [...]}
    PUT    /notes/{id}   → 200 {message}     404 if missing or not owned
    DELETE /notes/{id}   → 200 {message}     404 if missing or not owned
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.database import get_db_session
from jotter.middleware.auth_gate import require_user
from jotter.schemas.common import ErrorResponse, MessageResponse
from jotter.schemas.note import (
    NoteCreatedResponse,
    NoteListResponse,
    NoteResponse,
    NoteWriteRequest,
)
from jotter.services.note_store import note_store

logger = logging.getLogger(__name__)

# Shared by every route below
AUTH_RESPONSES = {
    401: {"description": "Missing token", "model": ErrorResponse},
    403: {"description": "Invalid or expired token", "model": ErrorResponse},
    500: {"description": "Database error", "model": ErrorResponse},
}

router = APIRouter(prefix="/notes", tags=["Notes"], responses=AUTH_RESPONSES)


@router.post(
    "",
    status_code=201,
    response_model=NoteCreatedResponse,
    summary="Create a note",
)
async def create_note(
    payload: Optional[NoteWriteRequest] = None,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteCreatedResponse:
    """Store a new note owned by the caller. Title, content, or the whole body may be omitted."""
    if payload is None:
        payload = NoteWriteRequest()
    note_id = await note_store.create(db, user_id, payload.title, payload.content)
    return NoteCreatedResponse(message="Note added successfully", note_id=note_id)


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List the caller's notes",
)
async def list_notes(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    """Return every note owned by the caller, oldest first."""
    notes = await note_store.list(db, user_id)
    return NoteListResponse(notes=[NoteResponse.model_validate(note) for note in notes])


@router.put(
    "/{note_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Replace a note's title and content",
)
async def update_note(
    note_id: int,
    payload: Optional[NoteWriteRequest] = None,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Overwrite title and content. A field left out of the body (or a missing body) becomes null.

    Answers 404 both for unknown ids and for notes owned by someone else.
    """
    if payload is None:
        payload = NoteWriteRequest()
    await note_store.update(db, note_id, user_id, payload.title, payload.content)
    return MessageResponse(message="Note updated successfully")


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Delete a note the caller owns; 404 otherwise."""
    await note_store.delete(db, note_id, user_id)
    return MessageResponse(message="Note deleted successfully")
