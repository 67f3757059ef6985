"""
Pydantic models for user data.

Request bodies for login, registration and email changes, plus the
shape of a user as returned by the API.  Stored user records use
camelCase keys (``createdAt``); the models accept and emit those names
through aliases.  Passwords never appear in ``UserRead``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserLogin(BaseModel):
    """Credentials for a login attempt."""

    email: str = Field(..., examples=["student@example.com"])
    password: str = Field(..., examples=["student123"])


class UserCreate(BaseModel):
    """Schema for registering a student account."""

    name: str = Field(..., min_length=1, examples=["Ada Obi"])
    email: str = Field(..., min_length=1, examples=["ada@example.com"])
    password: str = Field(..., min_length=1, examples=["strongpassword"])

    @field_validator("name", "email")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ChangeEmail(BaseModel):
    """Schema for changing the email address of an existing user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    new_email: str = Field(..., alias="newEmail", min_length=1)

    @field_validator("new_email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: Optional[str] = None
    email: str
    role: Literal["admin", "student"] = "student"
    created_at: Optional[str] = Field(None, alias="createdAt")
    verified: bool = False
