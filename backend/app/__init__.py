"""
Bug Reporter Backend — Application Package
============================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Record Store Gateway)   │  ← CRUD, store-assigned fields
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    reporter/   Embeddable reporting client: widget configuration,
                submission composer, form state, list state, HTTP client.
                Talks to the API above only over HTTP.
"""

__version__ = "1.0.0"
