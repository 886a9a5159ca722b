"""
Snippetbox — Store Layer
==========================

What:  The only code that talks to the database.

Store Inventory:
    - SnippetStore: insert / get / latest, with the expiry window
    - UserStore:    insert / authenticate / get, with email uniqueness

Stores are constructed once at startup with an async_sessionmaker and
injected into the handlers; there is no module-level database handle.
"""

from snippetbox.stores.snippets import SnippetStore
from snippetbox.stores.users import UserStore

__all__ = ["SnippetStore", "UserStore"]
