# Middleware package init
"""
Jotter Backend: Middleware Package
===================================

What:  Cross-cutting concerns applied to requests.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

    The order is reversed for responses, so the logging middleware sees the
    final status code and the request ID is added to response headers.

Route-level guard:
    auth_gate.require_user is a dependency, not a chain member. It runs only
    for the /notes routes, after the chain above.
"""
