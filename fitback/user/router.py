"""User domain router.

User management routes behind the auth gate. Every route requires a valid
session token; the token is not checked against the store.
"""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import and_, select

from fitback.auth.dependencies import CurrentUserIdDep, require_auth
from fitback.core.constants import CommonResponses, Routes
from fitback.core.deps import SessionDep
from fitback.user.exceptions import EmailExistsError, UserNotFoundError
from fitback.user.models import User
from fitback.user.schemas import UserMessage, UserRead, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.PRIVATE.prefix,
    tags=[Routes.PRIVATE.tag],
    dependencies=[Depends(require_auth)],
    responses={**CommonResponses.UNAUTHORIZED},
)


@router.get("/getallusers", response_model=list[UserRead])
def list_users(session: SessionDep):
    """List all users."""
    return session.exec(select(User)).all()


@router.get(
    "/getuserbyid/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
def get_user(user_id: uuid.UUID, session: SessionDep):
    """Get a user by ID."""
    user = session.get(User, user_id)
    if not user:
        raise UserNotFoundError()
    return user


@router.delete("/deleteall", response_model=UserMessage)
def delete_all_users(session: SessionDep, caller_id: CurrentUserIdDep):
    """Delete every user."""
    result = session.exec(delete(User))  # type: ignore[call-overload]
    session.commit()
    logger.warning(
        "All users deleted (%s rows)", result.rowcount, extra={"user_id": caller_id}
    )
    return UserMessage(message="All users deleted successfully")


@router.delete(
    "/deletebyid/{user_id}",
    response_model=UserMessage,
    responses={**CommonResponses.NOT_FOUND},
)
def delete_user(user_id: uuid.UUID, session: SessionDep, caller_id: CurrentUserIdDep):
    """Delete a user by ID."""
    user = session.get(User, user_id)
    if not user:
        raise UserNotFoundError()
    session.delete(user)
    session.commit()
    logger.info("User %s deleted", user_id, extra={"user_id": caller_id})
    return UserMessage(message="User deleted successfully")


@router.put(
    "/editbyid/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.CONFLICT},
)
def update_user(user_id: uuid.UUID, user_update: UserUpdate, session: SessionDep):
    """Update a user's profile fields and email by ID.

    Credentials and verification state cannot be changed here.
    """
    user = session.get(User, user_id)
    if not user:
        raise UserNotFoundError()

    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)

    # Check if new email is already taken by another user
    if "email" in update_data and update_data["email"] != user.email:
        email_exists = session.exec(
            select(User).where(
                and_(User.email == update_data["email"], User.id != user_id)
            )
        ).first()
        if email_exists:
            raise EmailExistsError("Email already in use")

    for key, value in update_data.items():
        setattr(user, key, value)

    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise EmailExistsError("Email already in use") from e
    session.refresh(user)
    return user
