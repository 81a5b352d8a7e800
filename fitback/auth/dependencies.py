"""Auth domain dependencies.

The auth gate for FastAPI routes: resolves the caller's user id from a session
token and type aliases for injecting it.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fitback.auth.exceptions import NotAuthenticatedError
from fitback.auth.tokens import SessionTokenService, get_session_token_service
from fitback.auth.verification import VerificationService
from fitback.core.constants import SESSION_COOKIE_NAME
from fitback.core.deps import SessionDep, SettingsDep

security = HTTPBearer(auto_error=False)

SessionTokenDep = Annotated[SessionTokenService, Depends(get_session_token_service)]


def get_current_user_id(
    request: Request,
    tokens: SessionTokenDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> str:
    """Verify the session token on a request and return its user id.

    Token sources (in priority order):
    1. ``token`` cookie (set by sign-in)
    2. ``Authorization: Bearer <token>`` header (API clients)

    Only the token is checked. The user store is not consulted, so a deleted
    user whose token has not expired yet still passes.

    Raises:
        NotAuthenticatedError: If neither source carries a token
        InvalidTokenError: If the token fails verification
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials

    if not token:
        raise NotAuthenticatedError()

    user_id = tokens.verify(token)
    request.state.user_id = user_id
    return user_id


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]


def require_auth(_user_id: CurrentUserIdDep) -> None:
    """Require a valid session without injecting the user id.

    Use as a router-level dependency when all routes require auth:
        router = APIRouter(dependencies=[Depends(require_auth)])
    """
    pass  # Token already validated by CurrentUserIdDep


def get_verification_service(
    session: SessionDep, settings: SettingsDep
) -> VerificationService:
    return VerificationService(session, settings)


VerificationDep = Annotated[VerificationService, Depends(get_verification_service)]
