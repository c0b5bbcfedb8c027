# Middleware package init
"""
Product API Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Origin Gate] → [CORS] → Route Table

    1. Request ID first: every later log line and error body can carry it
    2. Logging: records status and duration, including gate refusals
    3. Origin Gate: refuses foreign origins before the body is read
       or any route is matched
    4. CORS (Starlette CORSMiddleware, mounted in main.py): preflight
       replies and response headers for the admitted origin
"""
