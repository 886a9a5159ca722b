"""
Snippetbox — Snippet Store
============================

What:  Persistence operations for snippets: insert, get, latest.
How:   Each operation opens its own AsyncSession from the injected factory
       inside `async with`, so the pooled connection goes back to the pool
       on every exit path. Liveness is always evaluated in SQL against the
       store's clock (expires > now), never by filtering in Python.

Query plans:
    get:     SELECT ... WHERE id = :id AND expires > :now
    latest:  SELECT ... WHERE expires > :now ORDER BY created DESC, id DESC LIMIT :n
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.database import utc_now
from snippetbox.exceptions import NoRecord, PersistenceError
from snippetbox.models.snippet import Snippet
from snippetbox.schemas.snippet import SnippetRecord

logger = logging.getLogger(__name__)

# Upper bound for latest(), regardless of the requested limit.
LATEST_MAX = 10


class SnippetStore:
    """
    Store for Snippet rows.

    Args:
        session_factory: async_sessionmaker bound to the application's engine
        clock: returns the current UTC time; injectable for tests
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self._clock = clock

    async def insert(self, title: str, content: str, expiry_days: int) -> int:
        """
        Persist a new snippet and return its id.

        created = now, expires = now + expiry_days. Title and content are
        stored as given; validating them is the caller's job.

        Raises:
            ValueError: expiry_days is not a positive integer
            PersistenceError: the row could not be written
        """
        if expiry_days <= 0:
            raise ValueError(f"expiry_days must be positive, got {expiry_days}")

        now = self._clock()
        snippet = Snippet(
            title=title,
            content=content,
            created=now,
            expires=now + timedelta(days=expiry_days),
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(snippet)
                    await session.flush()
                    snippet_id = snippet.id
        except SQLAlchemyError as e:
            logger.error("Failed to insert snippet: %s", e, exc_info=True)
            raise PersistenceError(
                context={"operation": "snippets.insert", "error_type": type(e).__name__},
            ) from e

        logger.info("Snippet %d created (expires in %d days)", snippet_id, expiry_days)
        return snippet_id

    async def get(self, snippet_id: int) -> SnippetRecord:
        """
        Fetch a live snippet by id.

        Raises:
            NoRecord: no snippet with this id, or it has expired
            PersistenceError: the query failed
        """
        now = self._clock()
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Snippet).where(
                        Snippet.id == snippet_id,
                        Snippet.expires > now,
                    )
                )
                snippet = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, e)
            raise PersistenceError(
                context={"operation": "snippets.get", "snippet_id": snippet_id},
            ) from e

        if snippet is None:
            raise NoRecord(resource="snippet", context={"snippet_id": snippet_id})
        return SnippetRecord.model_validate(snippet)

    async def latest(self, limit: int = LATEST_MAX) -> List[SnippetRecord]:
        """
        Live snippets, newest first, at most LATEST_MAX of them.

        An empty list is a valid result.
        """
        limit = max(0, min(limit, LATEST_MAX))
        now = self._clock()
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Snippet)
                    .where(Snippet.expires > now)
                    .order_by(desc(Snippet.created), desc(Snippet.id))
                    .limit(limit)
                )
                snippets = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets: %s", e, exc_info=True)
            raise PersistenceError(
                context={"operation": "snippets.latest", "error_type": type(e).__name__},
            ) from e

        return [SnippetRecord.model_validate(s) for s in snippets]
