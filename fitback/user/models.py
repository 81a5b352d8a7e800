"""User domain models.

SQLModel table definition for User.
"""

import uuid
from datetime import UTC, datetime

from pydantic import EmailStr
from sqlalchemy import text
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC time without microseconds."""
    return datetime.now(UTC).replace(microsecond=0)


class User(SQLModel, table=True):
    """User database model.

    Note: password_hash and pending_email_verification_token are internal-only
    and must never be exposed in API responses.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: EmailStr = Field(index=True, unique=True, max_length=255)
    password_hash: str = Field(max_length=255)

    user_name: str = Field(max_length=100)
    age: int
    fitness_goal: str = Field(max_length=100)
    fitness_level: str = Field(max_length=100)
    subscription_status: str = Field(max_length=50)

    email_verified: bool = Field(default=False)
    pending_email_verification_token: str | None = Field(
        default=None, index=True, max_length=255
    )

    created_at: datetime = Field(
        default_factory=_utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=_utc_now,
        sa_column_kwargs={
            "server_default": text("CURRENT_TIMESTAMP"),
            "onupdate": _utc_now,
        },
    )
