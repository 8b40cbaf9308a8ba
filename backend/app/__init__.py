"""
Ledgerline Backend — Application Package Initializer
====================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn app.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Validators + Services (Logic)   │  ← Required fields, SQL statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy tables + Pydantic
    ├─────────────────────────────────────┤
    │        Gateway (Persistence)        │  ← Async engine, one statement per call
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
