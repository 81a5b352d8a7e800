"""Email verification and password reset workflows.

Email verification moves a user from unverified (pending token stored on the
record) to verified (token cleared). The move happens once: a redeemed token
no longer matches anything.

Password reset replaces the stored hash with a freshly generated password and
mails the plaintext. The new hash is committed before delivery is attempted,
so a failed delivery still leaves the password changed.
"""

import logging

from sqlmodel import Session, select

from fitback.auth.exceptions import TokenNotFoundError
from fitback.auth.passwords import (
    generate_opaque_token,
    generate_password,
    hash_password,
)
from fitback.core.email import send_email_verification_email, send_password_reset_email
from fitback.core.exceptions import EmailDeliveryError
from fitback.core.settings import Settings
from fitback.user.exceptions import UserNotFoundError
from fitback.user.models import User

logger = logging.getLogger(__name__)


class VerificationService:
    """Token issuance and redemption for one request's store session."""

    def __init__(self, session: Session, settings: Settings):
        self._session = session
        self._settings = settings

    def verification_url(self, token: str) -> str:
        return f"{self._settings.verification_base_url}/{token}"

    def request_verification(self, user: User) -> str:
        """Attach a new pending token to ``user`` and mail the link.

        Returns:
            The pending token
        """
        token = generate_opaque_token()
        user.pending_email_verification_token = token
        self._session.add(user)
        self._session.commit()
        self._session.refresh(user)

        try:
            send_email_verification_email(
                user.email, self.verification_url(token), settings=self._settings
            )
        except EmailDeliveryError:
            logger.warning(
                "Verification email for user %s was not delivered",
                user.id,
                exc_info=True,
                extra={"user_id": str(user.id)},
            )
        return token

    def redeem(self, token: str) -> User:
        """Mark the user owning ``token`` as verified and consume the token.

        Raises:
            TokenNotFoundError: If no pending verification uses this token
        """
        if not token or not token.strip():
            raise TokenNotFoundError()

        user = self._session.exec(
            select(User).where(User.pending_email_verification_token == token)
        ).first()
        if user is None:
            raise TokenNotFoundError()

        user.email_verified = True
        user.pending_email_verification_token = None
        self._session.add(user)
        self._session.commit()
        self._session.refresh(user)

        logger.info("Email verified for user %s", user.id, extra={"user_id": str(user.id)})
        return user

    def reset_password(self, email: str) -> bool:
        """Replace the password of the user with ``email`` and mail it.

        Returns:
            True if the new password was handed to the mail transport

        Raises:
            UserNotFoundError: If no user has this email (nothing is changed)
        """
        user = self._session.exec(select(User).where(User.email == email)).first()
        if user is None:
            raise UserNotFoundError()

        new_password = generate_password()
        user.password_hash = hash_password(new_password, self._settings.bcrypt_rounds)
        self._session.add(user)
        self._session.commit()

        try:
            send_password_reset_email(email, new_password, settings=self._settings)
        except EmailDeliveryError:
            # TODO: stage the new hash until delivery is confirmed once product
            # agrees on the behavior change; today the old password is already gone.
            logger.warning(
                "Password reset email for user %s was not delivered",
                user.id,
                exc_info=True,
                extra={"user_id": str(user.id)},
            )
            return False
        return True
