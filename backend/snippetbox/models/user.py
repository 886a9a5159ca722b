"""
Snippetbox — User SQLAlchemy Model
====================================

What:  ORM model for the `users` table.
Who:   Used by UserStore and by Alembic for schema management.

Table Design:
    - email carries a named UNIQUE constraint (uq_users_email); the store
      relies on it for atomic duplicate detection
    - hashed_password holds the output of the configured PasswordHasher,
      never the plaintext
"""

from datetime import datetime

from sqlalchemy import Boolean, Integer, LargeBinary, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base, UTCDateTime


class User(Base):
    """A registered account that can authenticate with email + password."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    hashed_password: Mapped[bytes] = mapped_column(LargeBinary(), nullable=False)

    created: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    activated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', activated={self.activated})>"
