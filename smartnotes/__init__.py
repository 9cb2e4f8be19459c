"""
SmartNotes Backend — Application Package Initializer
====================================================

What: Marks the `smartnotes` directory as a Python package.
Who:  Used by uvicorn (`smartnotes.main:app`), Alembic and pytest.

Architecture Note:
    The service follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Session Context + Services        │  ← identity, summarization, flows
    ├─────────────────────────────────────┤
    │        Data Access Facade           │  ← owner-scoped CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never query the database directly: every read and write goes
    through DataAccessFacade, which scopes it by the signed-in identity.
"""

__version__ = "1.0.0"
