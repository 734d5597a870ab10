"""
Jotter Backend: Note Store
===========================

What:  Ownership-scoped CRUD on the `notes` table.
How:   Every statement carries `owner_id = :caller`. Update and delete are a
       single UPDATE/DELETE whose WHERE clause conjoins id AND owner_id;
       the affected row count decides between success and NotFoundError.
Who:   Called by the notes route handlers with the user id resolved by the
       auth gate.

Ownership probing:
    "No such note" and "note owned by someone else" both match zero rows and
    raise the same NotFoundError, so a caller learns nothing about other
    users' notes. There is no separate existence check that could race with
    a concurrent delete.

Query plan:
    list:   SELECT ... WHERE owner_id = :owner ORDER BY id
            → idx_notes_owner_id
    update: UPDATE notes SET title, content WHERE id = :id AND owner_id = :owner
            → primary key lookup, owner compared on the same row
    delete: DELETE FROM notes WHERE id = :id AND owner_id = :owner
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import NotFoundError, StorageError
from jotter.models.note import Note

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Stateless data access for notes. Every method requires the owner id.

    Error Handling Strategy:
        SQLAlchemy errors are rolled back and wrapped in StorageError (the
        handler logs the context and returns a generic 500). NotFoundError
        is raised only for zero-row updates/deletes.
    """

    async def create(
        self,
        db: AsyncSession,
        owner_id: int,
        title: Optional[str],
        content: Optional[str],
    ) -> int:
        """
        Insert a note for `owner_id` and return its id.

        created_at is assigned here by the model default, never by the caller.
        """
        note = Note(owner_id=owner_id, title=title, content=content)
        db.add(note)
        try:
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating note for user %d: %s", owner_id, str(e))
            raise StorageError(context={"error_type": type(e).__name__})

        logger.info("Note %d created by user %d", note.id, owner_id)
        return note.id

    async def list(self, db: AsyncSession, owner_id: int) -> List[Note]:
        """
        Return all notes owned by `owner_id`, ordered by id.

        The result is materialized before returning, a snapshot at call time.
        """
        try:
            result = await db.execute(
                select(Note).where(Note.owner_id == owner_id).order_by(Note.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for user %d: %s", owner_id, str(e))
            raise StorageError(context={"error_type": type(e).__name__})

    async def update(
        self,
        db: AsyncSession,
        note_id: int,
        owner_id: int,
        title: Optional[str],
        content: Optional[str],
    ) -> None:
        """
        Replace title and content of a note the caller owns.

        Raises:
            NotFoundError: no note with this id belongs to `owner_id` (→ 404)
            StorageError: statement failed (→ 500)
        """
        statement = (
            update(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id)
            .values(title=title, content=content)
            .execution_options(synchronize_session=False)
        )
        matched = await self._execute_scoped(db, statement, note_id, owner_id, "update")
        if matched == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        logger.info("Note %d updated by user %d", note_id, owner_id)

    async def delete(self, db: AsyncSession, note_id: int, owner_id: int) -> None:
        """
        Delete a note the caller owns.

        Raises:
            NotFoundError: no note with this id belongs to `owner_id` (→ 404)
            StorageError: statement failed (→ 500)
        """
        statement = (
            delete(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        matched = await self._execute_scoped(db, statement, note_id, owner_id, "delete")
        if matched == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        logger.info("Note %d deleted by user %d", note_id, owner_id)

    async def _execute_scoped(self, db: AsyncSession, statement, note_id: int, owner_id: int, action: str) -> int:
        try:
            result = await db.execute(statement)
            await db.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "Database error on %s of note %d for user %d: %s",
                action, note_id, owner_id, str(e),
            )
            raise StorageError(context={"error_type": type(e).__name__, "note_id": note_id})


# ── Singleton Instance ────────────────────────────────────────────────────
note_store = NoteStore()
