"""GitHub bridge router.

Public routes for GitHub login and gist lookup.
"""

from typing import Any

from fastapi import APIRouter

from fitback.core.constants import CommonResponses, Routes
from fitback.github.schemas import GitHubLoginRequest
from fitback.github.service import GitHubServiceDep

router = APIRouter(
    prefix=Routes.GITHUB.prefix,
    tags=[Routes.GITHUB.tag],
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.BAD_GATEWAY},
)


@router.post("/auth/github")
async def github_login(payload: GitHubLoginRequest, github: GitHubServiceDep) -> Any:
    """Exchange a GitHub OAuth code and return the GitHub profile."""
    return await github.login(payload.code)


@router.get("/gists/{username}", responses={**CommonResponses.NOT_FOUND})
async def list_gists(username: str, github: GitHubServiceDep) -> Any:
    """List the public gists of a GitHub user."""
    return await github.list_gists(username)
