"""User domain schemas.

Request and response schemas for user operations. JSON uses camelCase
field names (userName, fitnessGoal, ...); Python code uses snake_case.

Security notes:
- password_hash and pending_email_verification_token never appear here
- UserUpdate cannot touch credentials or verification state
"""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserProfile(CamelModel):
    """Profile attributes collected at signup."""

    user_name: str = Field(min_length=1, max_length=100)
    age: int = Field(gt=0, lt=150)
    fitness_goal: str = Field(min_length=1, max_length=100)
    fitness_level: str = Field(min_length=1, max_length=100)
    subscription_status: str = Field(min_length=1, max_length=50)


class UserRead(UserProfile):
    """Response schema for user data."""

    id: uuid.UUID
    email: EmailStr
    email_verified: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC (e.g. 2026-01-19T12:34:56Z)."""
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            # SQLite hands back naive datetimes; they were written as UTC.
            utc_value = value.replace(tzinfo=UTC)
        return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class UserUpdate(CamelModel):
    """Schema for editing a user by id.

    Only profile fields and email are editable. Unknown keys such as
    passwordHash or emailVerified are ignored.
    """

    email: EmailStr | None = None
    user_name: str | None = Field(default=None, min_length=1, max_length=100)
    age: int | None = Field(default=None, gt=0, lt=150)
    fitness_goal: str | None = Field(default=None, min_length=1, max_length=100)
    fitness_level: str | None = Field(default=None, min_length=1, max_length=100)
    subscription_status: str | None = Field(default=None, min_length=1, max_length=50)


class UserMessage(CamelModel):
    """Generic message response for user operations."""

    message: str
