"""
Snippetbox — Snippet Schemas
==============================

What:  Pydantic models for snippet data leaving the store layer and for the
       snippet creation form.
How:   SnippetRecord is built from ORM rows (from_attributes) so handlers never
       hold a live ORM object. SnippetForm validates POST /snippet/create.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SnippetRecord(BaseModel):
    """Request-scoped copy of a persisted snippet."""

    id: int
    title: str
    content: str
    created: datetime
    expires: datetime

    model_config = {"from_attributes": True, "frozen": True}


EXPIRY_OPTIONS = (365, 7, 1)


class SnippetForm(BaseModel):
    """
    Form fields for creating a snippet.

    expires is a number of days and must be one of EXPIRY_OPTIONS
    (1 year, 1 week, 1 day).
    """

    title: str = Field(max_length=100)
    content: str
    expires: int = 365

    @field_validator("expires")
    @classmethod
    def known_expiry(cls, v: int) -> int:
        if v not in EXPIRY_OPTIONS:
            raise ValueError("This field is invalid")
        return v

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field cannot be blank")
        return v


class HomePage(BaseModel):
    """Document returned by GET /."""

    snippets: List[SnippetRecord]
    flash: Optional[str] = None


class SnippetPage(BaseModel):
    """Document returned by GET /snippet/:id."""

    snippet: SnippetRecord
    flash: Optional[str] = None
