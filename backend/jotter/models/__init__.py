"""ORM models. Importing this package registers every table on Base.metadata."""

from jotter.models.note import Note
from jotter.models.user import User

__all__ = ["Note", "User"]
