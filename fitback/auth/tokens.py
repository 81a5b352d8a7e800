"""Session token issuance and verification.

Session tokens are HS256-signed JWTs carrying the user id as ``sub``. They are
never stored server-side: a token is valid exactly when its signature checks
out and it has not expired.
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import jwt

from fitback.auth.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = timedelta(hours=1)
_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class SessionTokenService:
    """Signs and verifies session tokens with a single process-wide secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = DEFAULT_EXPIRES_IN,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in

    @property
    def expires_in_seconds(self) -> int:
        return int(self._expires_in.total_seconds())

    def issue(self, user_id: uuid.UUID | str, now: datetime | None = None) -> str:
        """Create a signed token for ``user_id``.

        Args:
            user_id: Subject of the token
            now: Issue time, defaults to the current UTC time

        Returns:
            Encoded JWT string
        """
        issued_at = now or datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._expires_in,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the user id a token was issued for.

        Raises:
            InvalidTokenError: For any malformed, tampered or expired token.
                The message is the same in every case.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            logger.debug("Session token rejected: %s", type(e).__name__)
            raise InvalidTokenError() from e

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError()
        return subject


@lru_cache
def get_session_token_service() -> SessionTokenService:
    """Get cached session token service built from settings.

    The signing secret is read once per process and never changes.
    """
    from fitback.core.settings import get_settings

    settings = get_settings()
    return SessionTokenService(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.session_expires_in,
    )
