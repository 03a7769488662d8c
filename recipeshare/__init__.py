"""
RecipeShare Backend - Application Package
==========================================

What: HTTP backend for a recipe-sharing application.
Who:  Imported by uvicorn (recipeshare.main:app) and by pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (validation, files, store)│  ← Orchestration, rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    A request flows one way: route → validation → file store / recipe store
    → route → client. Nothing runs in the background.
"""

__version__ = "1.0.0"
