"""
Snippetbox — Session Capability
=================================

What:  The interface the pipeline uses to keep per-visitor state between
       requests (flash messages, the authenticated user id).
How:   SessionStore is a protocol over an external key-value service keyed by
       an opaque token. Session is the request-scoped view handlers read and
       write; the session_enable middleware loads it before the handler and
       persists it afterwards.

The core never assumes the store is in-process: every store call is awaited
and may fail with SessionUnavailable. MemorySessionStore exists for local
development and tests.
"""

import logging
import secrets
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

# Session keys used by the handlers.
FLASH_KEY = "flash"
AUTH_USER_KEY = "authenticated_user_id"


class SessionStore(Protocol):
    """External per-visitor key-value state, addressed by token."""

    async def load(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the stored data, or None for unknown or expired tokens."""
        ...

    async def save(self, token: str, data: Dict[str, Any], lifetime: timedelta) -> None:
        ...

    async def delete(self, token: str) -> None:
        ...


def new_token() -> str:
    return secrets.token_urlsafe(32)


class Session:
    """
    Request-scoped session state.

    Attributes:
        token: the token the data is stored under (None until first save)
        modified: True when the data must be written back
        destroyed: True when the stored session must be deleted
    """

    def __init__(self, token: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        self.token = token
        self._data: Dict[str, Any] = dict(data or {})
        self.modified = False
        self.destroyed = False
        self.stale_token: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def pop(self, key: str, default: Any = None) -> Any:
        """Read and remove a value (flash messages are shown once)."""
        if key not in self._data:
            return default
        self.modified = True
        return self._data.pop(key)

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self.modified = True

    def exists(self, key: str) -> bool:
        return key in self._data

    def renew(self) -> None:
        """
        Move the data to a fresh token.

        Called on login and logout; the old token is deleted when the session
        is committed.
        """
        if self.token is not None and self.stale_token is None:
            self.stale_token = self.token
        self.token = None
        self.modified = True

    def destroy(self) -> None:
        self._data.clear()
        self.destroyed = True
        self.modified = True

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class MemorySessionStore:
    """
    In-process SessionStore with per-entry expiry.

    Expired entries are dropped when their token is loaded, and by a sweep
    that save() runs at most once every sweep_interval seconds, so sessions
    of visitors who never return do not accumulate.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ):
        self._clock = clock
        self._items: Dict[str, Tuple[Dict[str, Any], float]] = {}
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    async def load(self, token: str) -> Optional[Dict[str, Any]]:
        item = self._items.get(token)
        if item is None:
            return None
        data, deadline = item
        if self._clock() >= deadline:
            del self._items[token]
            return None
        return dict(data)

    async def save(self, token: str, data: Dict[str, Any], lifetime: timedelta) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep_expired(now)
        self._items[token] = (dict(data), now + lifetime.total_seconds())

    async def delete(self, token: str) -> None:
        self._items.pop(token, None)

    def _sweep_expired(self, now: float) -> None:
        expired = [token for token, (_, deadline) in self._items.items() if now >= deadline]
        for token in expired:
            del self._items[token]
        self._next_sweep = now + self._sweep_interval
        if expired:
            logger.debug("Swept %d expired sessions", len(expired))

    def __len__(self) -> int:
        return len(self._items)
