# Routes package init
"""
Jotter Backend: API Routes Package
===================================

Route Inventory:
    - auth.py:    POST /register, POST /login           (public)
    - notes.py:   POST/GET /notes, PUT/DELETE /notes/{id} (bearer token)
    - health.py:  GET /, GET /health                    (public)

Routes stay thin: they extract the body and the caller's id, call a
service, and pick the status code. Business rules live in services.
"""
