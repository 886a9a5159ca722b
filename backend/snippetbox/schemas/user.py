"""
Snippetbox — User Schemas
===========================

What:  Pydantic models for user data leaving the store layer and for the
       signup / login forms.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRecord(BaseModel):
    """Request-scoped copy of a persisted user."""

    id: int
    name: str
    email: str
    hashed_password: bytes = Field(exclude=True, repr=False)
    created: datetime
    activated: bool

    model_config = {"from_attributes": True, "frozen": True}


class SignupForm(BaseModel):
    name: str = Field(max_length=255)
    email: EmailStr
    password: str = Field(min_length=10)

    @field_validator("name", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field cannot be blank")
        return v


class LoginForm(BaseModel):
    email: str
    password: str


class ProfilePage(BaseModel):
    """Document returned by GET /user/profile; the password hash is never serialized."""

    user: UserRecord
    flash: Optional[str] = None
