from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

DEFAULT_ROLE = "user"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class UserBase(SQLModel):
    username: str = Field(index=True, unique=True, min_length=3, max_length=64)
    email: Optional[str] = Field(default=None, index=True, unique=True, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: str = Field(default=DEFAULT_ROLE, max_length=32)


class User(UserBase, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    password_hash: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class UserPublic(UserBase):
    """Sanitized identity: every user field except the password hash."""

    id: str
    created_at: datetime
    updated_at: datetime


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserUpdate(SQLModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=64)
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[str] = Field(default=None, max_length=32)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)

    @field_validator("username", "role", "password")
    @classmethod
    def _not_null(cls, value: Optional[str]) -> str:
        # may be omitted, but never cleared
        if value is None:
            raise ValueError("may not be null")
        return value
