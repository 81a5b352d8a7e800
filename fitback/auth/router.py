"""Auth domain router.

Public authentication routes: registration, sign-in, email verification,
password reset, session check and logout. Handlers stay thin: failures are
raised as AppException subclasses and mapped to responses centrally.
"""

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from fitback.auth.dependencies import (
    CurrentUserIdDep,
    SessionTokenDep,
    VerificationDep,
)
from fitback.auth.exceptions import EmailNotVerifiedError, InvalidCredentialsError
from fitback.auth.passwords import hash_password, verify_password
from fitback.auth.schemas import (
    AuthMessage,
    AuthStatusResponse,
    PasswordResetRequest,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
)
from fitback.core.constants import SESSION_COOKIE_NAME, CommonResponses, Routes
from fitback.core.deps import SessionDep, SettingsDep
from fitback.user.exceptions import EmailExistsError
from fitback.user.models import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.PUBLIC.prefix,
    tags=[Routes.PUBLIC.tag],
    responses={**CommonResponses.BAD_REQUEST},
)


@router.post(
    "/signup",
    response_model=AuthMessage,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.CONFLICT},
)
def signup(
    payload: SignUpRequest,
    session: SessionDep,
    settings: SettingsDep,
    verification: VerificationDep,
):
    """Register a new, unverified user and send the verification email.

    No session is issued; the user must verify their email before signing in.
    """
    existing = session.exec(select(User).where(User.email == payload.email)).first()
    if existing:
        raise EmailExistsError()

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password, settings.bcrypt_rounds),
        user_name=payload.user_name,
        age=payload.age,
        fitness_goal=payload.fitness_goal,
        fitness_level=payload.fitness_level,
        subscription_status=payload.subscription_status,
        email_verified=False,
    )
    session.add(user)
    try:
        # Commits the new user together with its pending token.
        verification.request_verification(user)
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email.
        session.rollback()
        raise EmailExistsError() from e

    logger.info("User registered: %s", user.id, extra={"user_id": str(user.id)})
    return AuthMessage(message="User registered. Please verify your email.")


@router.post(
    "/signin",
    response_model=SignInResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
def signin(
    payload: SignInRequest,
    response: Response,
    session: SessionDep,
    tokens: SessionTokenDep,
):
    """Sign in with email/password.

    Sets the session token as an HttpOnly cookie and also returns it in the
    body for API clients.
    """
    user = session.exec(select(User).where(User.email == payload.email)).first()
    if user is None:
        raise InvalidCredentialsError()

    if not user.email_verified:
        raise EmailNotVerifiedError()

    if not verify_password(payload.password, user.password_hash):
        raise InvalidCredentialsError()

    token = tokens.issue(user.id)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=tokens.expires_in_seconds,
        httponly=True,
        secure=True,
        samesite="strict",
    )

    return SignInResponse(
        message="User logged in successfully", token=token, user_id=str(user.id)
    )


@router.get("/emailverify/{token}", response_model=AuthMessage)
def verify_email(token: str, verification: VerificationDep):
    """Redeem an email verification token."""
    verification.redeem(token)
    return AuthMessage(message="Email verified successfully!")


@router.post(
    "/resetpassword",
    response_model=AuthMessage,
    responses={**CommonResponses.NOT_FOUND},
)
def reset_password(payload: PasswordResetRequest, verification: VerificationDep):
    """Generate a new password for the account and email it to the owner."""
    verification.reset_password(payload.email)
    return AuthMessage(message="New password sent to your email")


@router.get(
    "/check-auth",
    response_model=AuthStatusResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def check_auth(user_id: CurrentUserIdDep):
    """Report whether the request carries a valid session token."""
    return AuthStatusResponse(message="User is authenticated", user_id=user_id)


@router.post("/logout", response_model=AuthMessage)
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=True,
        samesite="strict",
    )
    return AuthMessage(message="Logged out successfully")
