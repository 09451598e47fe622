"""
Bird Catalogue — Application Package
======================================

REST API for a catalogue of bird species/subspecies and curated lists of
birds, backed by PostgreSQL through async SQLAlchemy.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, links, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, queries, conflicts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
