"""
Snippetbox — User Store
=========================

What:  Persistence operations for users: insert, authenticate, get.
How:   Passwords go through the injected PasswordHasher before they reach the
       database. Hashing and verification run in the threadpool so a slow
       work factor never stalls the event loop. Email uniqueness is enforced by the uq_users_email
       constraint: insert attempts the INSERT and maps the resulting
       IntegrityError to DuplicateEmail, so two concurrent signups with the
       same address cannot both succeed and no read-then-write race exists.

Failure modes:
    insert        → DuplicateEmail | PersistenceError
    authenticate  → InvalidCredentials (unknown email, wrong password,
                    deactivated account) | PersistenceError
    get           → NoRecord | PersistenceError
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from snippetbox.database import utc_now
from snippetbox.exceptions import DuplicateEmail, InvalidCredentials, NoRecord, PersistenceError
from snippetbox.models.user import User
from snippetbox.schemas.user import UserRecord
from snippetbox.security import PasswordHasher

logger = logging.getLogger(__name__)

EMAIL_CONSTRAINT = "uq_users_email"


def _is_duplicate_email(error: IntegrityError) -> bool:
    """
    True when the IntegrityError comes from the email unique constraint.

    PostgreSQL reports the constraint name; SQLite reports the column
    ("UNIQUE constraint failed: users.email").
    """
    detail = str(error.orig)
    return EMAIL_CONSTRAINT in detail or "users.email" in detail


class UserStore:
    """
    Store for User rows.

    Args:
        session_factory: async_sessionmaker bound to the application's engine
        hasher: PasswordHasher used for new passwords and verification
        clock: returns the current UTC time; injectable for tests
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self._hasher = hasher
        self._clock = clock
        self._dummy_hash: Optional[bytes] = None

    async def insert(self, name: str, email: str, password: str) -> int:
        """
        Register a new user and return its id.

        Raises:
            DuplicateEmail: the email is already registered
            PersistenceError: any other storage fault
        """
        hashed_password = await run_in_threadpool(self._hasher.hash, password)
        user = User(
            name=name,
            email=email,
            hashed_password=hashed_password,
            created=self._clock(),
            activated=True,
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(user)
                    await session.flush()
                    user_id = user.id
        except IntegrityError as e:
            if _is_duplicate_email(e):
                logger.info("Signup rejected: duplicate email")
                raise DuplicateEmail(field="email") from e
            logger.error("Integrity error inserting user: %s", e)
            raise PersistenceError(
                context={"operation": "users.insert", "error_type": type(e).__name__},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Failed to insert user: %s", e, exc_info=True)
            raise PersistenceError(
                context={"operation": "users.insert", "error_type": type(e).__name__},
            ) from e

        logger.info("User %d registered", user_id)
        return user_id

    async def authenticate(self, email: str, password: str) -> int:
        """
        Return the id of the active user with these credentials.

        Raises:
            InvalidCredentials: unknown email, wrong password or inactive user
            PersistenceError: the lookup failed
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(User.id, User.hashed_password, User.activated).where(
                        User.email == email
                    )
                )
                row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during authentication: %s", e)
            raise PersistenceError(context={"operation": "users.authenticate"}) from e

        if row is None:
            # Burn a verification anyway so response time does not reveal
            # whether the address is registered.
            await run_in_threadpool(self._hasher.verify, await self._get_dummy_hash(), password)
            raise InvalidCredentials()

        user_id, hashed_password, activated = row
        matches = await run_in_threadpool(self._hasher.verify, hashed_password, password)
        if not matches or not activated:
            raise InvalidCredentials(context={"user_id": user_id})
        return user_id

    async def get(self, user_id: int) -> UserRecord:
        """
        Fetch a user by id.

        Raises:
            NoRecord: no user with this id
            PersistenceError: the query failed
        """
        try:
            async with self._session_factory() as session:
                user = await session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, e)
            raise PersistenceError(
                context={"operation": "users.get", "user_id": user_id},
            ) from e

        if user is None:
            raise NoRecord(resource="user", context={"user_id": user_id})
        return UserRecord.model_validate(user)

    async def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = await run_in_threadpool(self._hasher.hash, "snippetbox-dummy-password")
        return self._dummy_hash
