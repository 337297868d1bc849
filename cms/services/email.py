"""
Transactional email over SMTP (aiosmtplib).

Senders are scheduled as FastAPI background tasks, so API responses never
wait on SMTP and a failed delivery is logged rather than surfaced.
"""

import logging
from datetime import datetime
from email.message import EmailMessage
from html import escape
from typing import Optional

import aiosmtplib

from cms.config import get_settings

logger = logging.getLogger(__name__)

PRODUCT_NAME = "Headless CMS"

_LAYOUT = """<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h1 style="background-color: #4F46E5; color: white; padding: 20px; text-align: center;">{heading}</h1>
      <div style="padding: 20px; background-color: #f9fafb;">{body}</div>
      <p style="padding: 20px; text-align: center; font-size: 12px; color: #6b7280;">&copy; {year} {product}</p>
    </div>
  </body>
</html>
"""


def render(heading: str, body: str) -> str:
    return _LAYOUT.format(heading=heading, body=body, year=datetime.now().year, product=PRODUCT_NAME)


def build_message(to: str, subject: str, html: str, text: Optional[str] = None) -> EmailMessage:
    settings = get_settings()
    message = EmailMessage()
    message["From"] = settings.email_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content(text or subject)
    message.add_alternative(html, subtype="html")
    return message


async def send_email(to: str, subject: str, html: str, text: Optional[str] = None) -> bool:
    """
    Deliver one message.

    Returns:
        True on success, False when the SMTP exchange failed
    """
    settings = get_settings()
    message = build_message(to, subject, html, text)
    try:
        await aiosmtplib.send(
            message,
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user or None,
            password=settings.smtp_password or None,
            start_tls=settings.smtp_start_tls,
        )
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email '{subject}' to {to}: {e}")
        return False

    logger.info(f"Email '{subject}' sent to {to}")
    return True


async def send_welcome_email(email: str, full_name: str) -> bool:
    name = escape(full_name)
    body = (
        f"<p>Hello {name},</p>"
        f"<p>Your {PRODUCT_NAME} account has been created successfully.</p>"
        "<p>You can now log in to the admin panel and start managing content.</p>"
    )
    return await send_email(
        email,
        f"Welcome to {PRODUCT_NAME}",
        render(f"Welcome to {PRODUCT_NAME}", body),
        f"Hello {full_name}, your {PRODUCT_NAME} account has been created successfully.",
    )


def reset_url(token: str) -> str:
    return f"{get_settings().frontend_url.rstrip('/')}/reset-password?token={token}"


async def send_password_reset_email(email: str, full_name: str, token: str) -> bool:
    url = reset_url(token)
    minutes = get_settings().password_reset_expires_minutes
    body = (
        f"<p>Hello {escape(full_name)},</p>"
        f"<p>We received a request to reset the password for your {PRODUCT_NAME} account.</p>"
        f'<p style="text-align: center;"><a href="{escape(url)}">Reset Password</a></p>'
        f'<p style="word-break: break-all;">{escape(url)}</p>'
        f'<p style="color: #DC2626; font-weight: bold;">This link will expire in {minutes} minutes.</p>'
        "<p>If you didn't request a password reset, you can ignore this email.</p>"
    )
    return await send_email(
        email,
        f"Password Reset Request - {PRODUCT_NAME}",
        render("Password Reset Request", body),
        f"Hello {full_name}, use this link to reset your password: {url}. It will expire in {minutes} minutes.",
    )


async def send_application_notification(job_title: str, applicant_name: str, applicant_email: str) -> bool:
    body = (
        "<p>A new application has been submitted:</p>"
        f"<p><strong>Position:</strong> {escape(job_title)}</p>"
        f"<p><strong>Applicant Name:</strong> {escape(applicant_name)}</p>"
        f"<p><strong>Applicant Email:</strong> {escape(applicant_email)}</p>"
        "<p>Log in to the admin panel to review the application.</p>"
    )
    return await send_email(
        get_settings().admin_email,
        f"New Application: {job_title}",
        render("New Job Application Received", body),
        f"New application received for {job_title} from {applicant_name} ({applicant_email})",
    )
