"""
Snippetbox — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite), its own engine and
       stores, and a controllable clock. API tests drive the full host app
       through HTTPX's ASGITransport, no server process needed.

Fixture Hierarchy (all function-scoped):
    ├── settings:          Settings pointing at a per-test SQLite file
    ├── clock:             FrozenClock the stores read "now" from
    ├── engine:            AsyncEngine with the schema created
    ├── session_factory:   async_sessionmaker bound to engine
    ├── snippet_store / user_store
    ├── make_request:      factory for bare Starlette requests
    └── test_client:       HTTPX AsyncClient wired to create_app()
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Callable
from unittest.mock import MagicMock

# Override settings for testing BEFORE any snippetbox imports.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from snippetbox.config import Settings
from snippetbox.database import create_engine, create_schema, create_session_factory
from snippetbox.main import create_app
from snippetbox.sessions import MemorySessionStore
from snippetbox.stores import SnippetStore, UserStore

T0 = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeHasher:
    """Cheap stand-in for bcrypt; counts verify calls."""

    def __init__(self):
        self.verify_calls = 0

    def hash(self, plaintext: str) -> bytes:
        return b"fake$" + plaintext[::-1].encode("utf-8")

    def verify(self, hashed: bytes, plaintext: str) -> bool:
        self.verify_calls += 1
        return hashed == self.hash(plaintext)


@pytest.fixture
def settings(tmp_path) -> Settings:
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        static_dir=str(static_dir),
        bcrypt_rounds=4,
        session_retry_max_wait=0.01,
        log_level="WARNING",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine(settings)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def snippet_store(session_factory, clock) -> SnippetStore:
    return SnippetStore(session_factory, clock=clock)


@pytest.fixture
def user_store(session_factory, hasher, clock) -> UserStore:
    return UserStore(session_factory, hasher, clock=clock)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """
    Build a Starlette Request without a server.

    Usage:
        request = make_request("GET", "/snippet/42", cookies="session=abc")
    """

    def factory(method: str = "GET", path: str = "/", cookies: str | None = None) -> Request:
        headers = [(b"host", b"test")]
        if cookies:
            headers.append((b"cookie", cookies.encode("latin-1")))
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": b"",
            "headers": headers,
            "client": ("127.0.0.1", 5000),
            "server": ("test", 80),
        }
        return Request(scope)

    return factory


@pytest.fixture
def reporter() -> MagicMock:
    return MagicMock()


@pytest_asyncio.fixture
async def app(settings, hasher, reporter):
    app = create_app(
        settings,
        sessions=MemorySessionStore(),
        hasher=hasher,
        reporter=reporter,
    )
    await create_schema(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the host app in-process.

    Cookies persist across requests made with the same client, so session
    flows (flash messages, login) work as they would in a browser.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
