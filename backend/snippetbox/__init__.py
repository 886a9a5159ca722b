"""
Snippetbox — Application Package
==================================

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Middleware chains + Router        │  ← request pipeline
    ├─────────────────────────────────────┤
    │   Handlers                          │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Stores                            │  ← all database access
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Sessions and password hashing are consumed through small capability
    interfaces (snippetbox.sessions, snippetbox.security).
"""

__version__ = "1.0.0"
