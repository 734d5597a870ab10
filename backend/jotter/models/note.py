"""
Jotter Backend: Note SQLAlchemy Model
======================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteStore for ownership-scoped CRUD and by Alembic.

Table Design:
    - Integer primary key assigned by the database
    - owner_id: FOREIGN KEY → users.id, NOT NULL, never updated
    - title / content: nullable; a missing field is stored as NULL
    - created_at: set by the store at insert time (UTC), never updated

    Index on owner_id:
        Every query filters on owner_id (list, update, delete), so the index
        turns each of them into an index lookup instead of a table scan.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jotter.database import Base

if TYPE_CHECKING:
    from jotter.models.user import User


class Note(Base):
    """
    A text note owned by exactly one user.

    Lifecycle:
        1. Created by an authenticated user (owner_id = caller's id)
        2. Title/content replaced by the owner via PUT /notes/{id}
        3. Deleted by the owner via DELETE /notes/{id}
        Requests from any other user match zero rows and see 404.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        comment="Owning user; set from the authenticated caller at creation",
    )

    title: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    content: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # UTC in Python, CURRENT_TIMESTAMP for rows inserted outside the ORM
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    owner: Mapped["User"] = relationship(back_populates="notes")

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id}, created_at='{self.created_at}')>"
