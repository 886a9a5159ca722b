"""
Snippetbox — Snippet SQLAlchemy Model
=======================================

What:  ORM model for the `snippets` table.
Who:   Used by SnippetStore and by Alembic for schema management.

Table Design:
    - Integer primary key assigned by the database on insert
    - created / expires stored in UTC; a row is live while now < expires
    - Rows are never updated or deleted by the application

    Index on expires:  every read filters on expires > now
    Index on created:  latest() orders by created DESC
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base, UTCDateTime


class Snippet(Base):
    """
    A text post with a bounded visibility window.

    Lifecycle:
        1. Created by SnippetStore.insert (created = now, expires = now + N days)
        2. Live while now < expires, returned by get() and latest()
        3. Expired afterwards; the row remains but is unreachable
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    expires: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    __table_args__ = (
        CheckConstraint("expires > created", name="ck_snippets_expires_after_created"),
        Index("idx_snippets_expires", "expires"),
        Index("idx_snippets_created", created.desc()),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires='{self.expires}')>"
