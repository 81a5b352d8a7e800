"""Outbound email via Resend.

Senders here raise EmailDeliveryError when the transport is not configured or
rejects the message. Whether that failure matters is up to the caller; the
verification workflow treats delivery as best-effort.
"""

import logging

import resend

from fitback.core.constants import JinjaEmailTemplatesEnv
from fitback.core.exceptions import EmailDeliveryError
from fitback.core.settings import Settings

logger = logging.getLogger(__name__)


def _render_template(template_name: str, **context: str) -> str:
    """Render an email template with autoescaped context values."""
    template = JinjaEmailTemplatesEnv.get_template(template_name)
    return template.render(**context)


def init_resend(settings: Settings) -> None:
    """Initialize Resend with API key if available."""
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set; outbound email is disabled")
        return
    resend.api_key = settings.resend_api_key


def send_email(*, to_email: str, subject: str, html: str, settings: Settings) -> str:
    """Send one HTML email and return the provider message id.

    Raises:
        EmailDeliveryError: If no API key is configured or Resend fails
    """
    if not settings.resend_api_key:
        raise EmailDeliveryError("Email transport is not configured")

    try:
        result = resend.Emails.send(
            {
                "from": settings.mail_from,
                "to": to_email,
                "subject": subject,
                "html": html,
            }
        )
    except Exception as e:
        raise EmailDeliveryError(f"Failed to send '{subject}' email") from e

    message_id = result.get("id", "") if isinstance(result, dict) else ""
    logger.info("Email '%s' sent: id=%s", subject, message_id)
    return message_id


def send_email_verification_email(
    to_email: str, verification_url: str, *, settings: Settings
) -> str:
    """Send the signup email containing the verification link."""
    html_content = _render_template(
        "email-verification.html", verification_url=verification_url
    )
    return send_email(
        to_email=to_email,
        subject="Email Verification",
        html=html_content,
        settings=settings,
    )


def send_password_reset_email(
    to_email: str, new_password: str, *, settings: Settings
) -> str:
    """Send the freshly generated password to the account owner."""
    html_content = _render_template("password-reset.html", new_password=new_password)
    return send_email(
        to_email=to_email,
        subject="Password Reset",
        html=html_content,
        settings=settings,
    )
