"""
Email Service - transactional mail through fastapi-mail
Bodies are short inline HTML; callers decide whether a failure matters.
"""
import logging
from functools import lru_cache
from html import escape
from typing import List

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from homesphere.config import settings
from homesphere.utils.errors import ConfigError, EmailDeliveryError

logger = logging.getLogger(__name__)


@lru_cache
def get_mailer() -> FastMail:
    """Build the SMTP client once, on first use"""
    if not settings.mail_configured:
        raise ConfigError(details="SMTP settings (MAIL_SERVER, MAIL_FROM, MAIL_USERNAME, MAIL_PASSWORD) are incomplete")

    config = ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME,
        MAIL_PASSWORD=settings.MAIL_PASSWORD,
        MAIL_FROM=settings.MAIL_FROM,
        MAIL_FROM_NAME=settings.APP_NAME,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        SUPPRESS_SEND=1 if settings.MAIL_SUPPRESS_SEND else 0,
        USE_CREDENTIALS=True,
    )
    return FastMail(config)


async def send_email(recipients: List[str], subject: str, html: str) -> None:
    message = MessageSchema(
        subject=subject,
        recipients=recipients,
        body=html,
        subtype=MessageType.html,
    )
    mailer = get_mailer()
    try:
        await mailer.send_message(message)
    except Exception as e:
        logger.error(f"Failed to send '{subject}' to {recipients}: {e}")
        raise EmailDeliveryError(details=str(e)) from e
    logger.info(f"Sent '{subject}' to {recipients}")


def _button(url: str, label: str) -> str:
    return (
        f'<p><a href="{url}" style="background-color: #007bff; color: white; padding: 12px 24px; '
        f'text-decoration: none; border-radius: 5px;">{label}</a></p>'
        f'<p style="color: #666; font-size: 14px;">Or open this link: <a href="{url}">{url}</a></p>'
    )


async def send_verification_email(email: str, token: str) -> None:
    url = f"{settings.FRONTEND_URL}/verify-email?token={token}"
    html = (
        f"<h2>Welcome to {settings.APP_NAME}!</h2>"
        "<p>Please verify your email address to complete your registration.</p>"
        f"{_button(url, 'Verify Email Address')}"
        f"<p>This link will expire in {settings.EMAIL_VERIFICATION_EXPIRE_HOURS} hours.</p>"
    )
    await send_email([email], "Verify Your Email Address", html)


async def send_password_reset_email(email: str, token: str) -> None:
    url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    html = (
        "<h2>Password Reset Request</h2>"
        "<p>You requested a password reset. Use the link below to choose a new password.</p>"
        f"{_button(url, 'Reset Password')}"
        f"<p>This link will expire in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes.</p>"
        "<p>If you didn't request this, you can ignore this email.</p>"
    )
    await send_email([email], "Reset Your Password", html)


async def send_welcome_email(email: str, first_name: str) -> None:
    html = (
        f"<h2>Welcome to {settings.APP_NAME}, {escape(first_name)}!</h2>"
        "<p>Your email has been verified. You can now save favorites, leave reviews and contact agents.</p>"
        f"{_button(settings.FRONTEND_URL, 'Start Browsing')}"
    )
    await send_email([email], f"Welcome to {settings.APP_NAME}!", html)


async def send_agent_contact_email(
    agent_email: str,
    agent_name: str,
    sender_name: str,
    sender_email: str,
    subject: str,
    message: str,
) -> None:
    html = (
        f"<h2>New inquiry for {escape(agent_name)}</h2>"
        f"<p><strong>From:</strong> {escape(sender_name)} ({escape(sender_email)})</p>"
        f"<p><strong>Subject:</strong> {escape(subject)}</p>"
        f"<p>{escape(message)}</p>"
    )
    await send_email([agent_email], f"New inquiry: {subject}", html)
