"""GitHub bridge schemas."""

from pydantic import BaseModel, Field


class GitHubLoginRequest(BaseModel):
    """OAuth authorization code returned to the frontend by GitHub."""

    code: str = Field(min_length=1)
