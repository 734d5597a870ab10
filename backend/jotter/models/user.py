"""
Jotter Backend: User SQLAlchemy Model
======================================

What:  ORM model representing the `users` table.
Who:   Written by CredentialStore.create(), read by find_by_username().

Table Design:
    - Integer primary key assigned by the database
    - username: UNIQUE constraint; this is what makes duplicate registration
      fail atomically under concurrent requests
    - password_hash: bcrypt output ($2b$<cost>$<salt+digest>), 60 chars
    - No update or delete path exists for users
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jotter.database import Base

if TYPE_CHECKING:
    from jotter.models.note import Note


class User(Base):
    """A registered account. Owns zero or more notes."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Case-sensitive login name, immutable after registration",
    )

    # Never serialized in any response schema and never logged
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash with embedded salt and cost factor",
    )

    notes: Mapped[List["Note"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        # password_hash deliberately left out of the repr
        return f"<User(id={self.id}, username='{self.username}')>"
