"""GitHub OAuth and REST API bridge.

Thin pass-through: exchanges an OAuth code for an access token, returns the
GitHub profile for it, and lists a user's public gists. Nothing is persisted.
"""

import logging
from typing import Annotated, Any

import httpx
from fastapi import Depends

from fitback.core.deps import SettingsDep
from fitback.core.exceptions import BadRequestError, InternalError
from fitback.core.http import get_github_client
from fitback.core.retry import with_retry
from fitback.github.exceptions import (
    GistsNotFoundError,
    GitHubError,
    GitHubTokenMissingError,
)

logger = logging.getLogger(__name__)

GITHUB_OAUTH_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_API_URL = "https://api.github.com"


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise GitHubError("GitHub returned an invalid response") from e


class GitHubService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str | None,
        client_secret: str | None,
        api_url: str = GITHUB_API_URL,
        token_url: str = GITHUB_OAUTH_TOKEN_URL,
    ):
        self._client = client
        self._client_id = client_id
        self._client_secret = client_secret
        self._api_url = api_url.rstrip("/")
        self._token_url = token_url

    async def _get(self, path: str, access_token: str | None = None) -> httpx.Response:
        """GET an API path, retrying once on transport errors."""
        headers = {"Accept": "application/vnd.github+json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        url = f"{self._api_url}{path}"

        try:
            return await with_retry(
                lambda: self._client.get(url, headers=headers),
                exceptions=(httpx.TransportError,),
            )
        except httpx.RequestError as e:
            raise GitHubError("GitHub is unavailable") from e

    async def exchange_code(self, code: str) -> str:
        """Trade an OAuth authorization code for an access token.

        Not retried: GitHub codes are single-use.

        Raises:
            InternalError: If client credentials are not configured
            GitHubTokenMissingError: If GitHub returns no access token
            GitHubError: If GitHub is unreachable or answers with an error
        """
        if not self._client_id or not self._client_secret:
            raise InternalError("GitHub OAuth is not configured")

        try:
            response = await self._client.post(
                self._token_url,
                json={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "code": code,
                },
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as e:
            raise GitHubError("Failed to authenticate with GitHub") from e

        if response.status_code != 200:
            logger.info("GitHub token exchange failed: status=%s", response.status_code)
            raise GitHubError("Failed to authenticate with GitHub")

        data = _json_body(response)

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            # GitHub reports bad or expired codes as 200 with an "error" field.
            error_code = data.get("error") if isinstance(data, dict) else None
            logger.info("GitHub token exchange returned no token: error=%s", error_code)
            raise GitHubTokenMissingError()
        return access_token

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Return the GitHub profile of the token owner."""
        response = await self._get("/user", access_token=access_token)
        if response.status_code != 200:
            logger.info("GitHub user fetch failed: status=%s", response.status_code)
            raise GitHubError("Failed to authenticate with GitHub")
        return _json_body(response)

    async def login(self, code: str) -> dict[str, Any]:
        """Complete the OAuth flow and return the provider profile."""
        if not code.strip():
            raise BadRequestError("Authorization code is missing")
        access_token = await self.exchange_code(code)
        return await self.get_user(access_token)

    async def list_gists(self, username: str) -> list[dict[str, Any]]:
        """Return the public gists of ``username``.

        Raises:
            BadRequestError: If username is blank
            GistsNotFoundError: If the user is unknown or has no gists
            GitHubError: For any other upstream failure
        """
        username = username.strip()
        if not username:
            raise BadRequestError("Username is required")

        response = await self._get(f"/users/{username}/gists")
        if response.status_code == 404:
            raise GistsNotFoundError()
        if response.status_code != 200:
            logger.info(
                "GitHub gists fetch failed: user=%s status=%s",
                username,
                response.status_code,
            )
            raise GitHubError("Failed to fetch gists")

        gists = _json_body(response)
        if not gists:
            raise GistsNotFoundError()
        return gists


def get_github_service(settings: SettingsDep) -> GitHubService:
    return GitHubService(
        client=get_github_client(),
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
    )


GitHubServiceDep = Annotated[GitHubService, Depends(get_github_service)]
