"""
Jotter Backend: Note Request/Response Schemas
==============================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against these models and serializes
       responses through them (by alias, so `note_id` goes out as `noteId`).

Schemas are separate from the SQLAlchemy models so the API controls exactly
which columns are exposed.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteWriteRequest(BaseModel):
    """
    What:  Body for POST /notes and PUT /notes/{id}.

    Both fields are optional. On update, an omitted field overwrites the
    stored value with null; PUT replaces the whole note.
    """
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body text")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """One note as returned inside GET /notes."""
    id: int = Field(description="Unique note identifier")
    owner_id: int = Field(description="Id of the user who owns the note")
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body text")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class NoteListResponse(BaseModel):
    """
    What:  Body of GET /notes.
    Contains every note of the caller, oldest first. No pagination.
    """
    notes: List[NoteResponse] = Field(description="The caller's notes")


class NoteCreatedResponse(BaseModel):
    """Returned by POST /notes with HTTP 201."""
    message: str = Field(default="Note added successfully")
    note_id: int = Field(alias="noteId", description="Id of the new note")

    model_config = {"populate_by_name": True}
