"""
Jotter Backend: Application Package Initializer
================================================

What: Multi-user note-taking API (register, login, per-user note CRUD).
Who:  Imported by uvicorn (`jotter.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth Gate (bearer token check)    │  ← resolves the caller's user id
    ├─────────────────────────────────────┤
    │  Services (hashing, tokens, stores) │  ← business rules, ownership scoping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Every note query carries the owner id resolved by the auth gate, so
    isolation between users is enforced inside the SQL statement itself.
"""

__version__ = "1.0.0"
