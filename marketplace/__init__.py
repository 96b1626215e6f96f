"""
Local Marketplace Backend - Application Package
================================================

What:  Marks the `marketplace` directory as a Python package.
Who:   Imported by uvicorn (`marketplace.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (stores + geo search)    │  ← Business rules, queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Proximity search (services/geo.py) is pure and has no dependency on the
    layers below it; the listing store feeds it candidates.
"""

__version__ = "1.0.0"
