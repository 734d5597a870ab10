# Services package init
"""
Jotter Backend: Services Layer
===============================

What:  Business logic between routes (HTTP) and database (persistence).

Service Inventory:
    - PasswordHasher:   bcrypt hash/verify (CPU-bound, run in threadpool)
    - TokenService:     JWT issue/verify with the process-wide secret
    - CredentialStore:  users table (create, find_by_username)
    - NoteStore:        notes table, every statement scoped by owner id
    - AuthService:      register and login orchestration

Stores are stateless and receive the request's AsyncSession per call.
The hasher and token service are built once by create_app() and kept on
app.state.
"""
