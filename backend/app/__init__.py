"""
Product API Backend: Application Package Initializer
=====================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`app.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │  Middleware (request id, logging,   │  ← admission gate runs here
    │  origin gate)                       │
    ├─────────────────────────────────────┤
    │  Routes (route table + dispatcher)  │  ← validate before handle
    ├─────────────────────────────────────┤
    │  Services (product store handlers)  │  ← CRUD against the database
    ├─────────────────────────────────────┤
    │  Models & Schemas (Data)            │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database (Persistence)             │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The route table in routes/products.py feeds both the dispatcher and the
    OpenAPI document builder (openapi.py).
"""

__version__ = "1.0.0"
