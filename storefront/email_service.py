"""
Email Service using Resend
Transactional emails are written in MJML and compiled to HTML before sending.

This is the email API for the checkout and auth services: checkout calls
send_order_status_email when an order changes status, the auth service calls
send_password_reset_email with the reset link it issued. Nothing inside the
products or reviews routes sends mail.
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY, STORE_NAME
from .email_templates import generate_subject, order_status_template, password_reset_template
from .schemas import OrderNotification

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailError(Exception):
    """Raised when an email cannot be rendered or sent"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailError(f"Failed to compile MJML template: {e}") from e

    # mjml_to_html returns a dict-like result with 'html' and 'errors'
    errors = result.get("errors") if hasattr(result, "get") else None
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    if hasattr(result, "get"):
        return result.get("html", "")
    return str(result)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailError("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailError(f"Failed to send email: {e}") from e

    logger.info(f"✅ Email sent successfully via Resend: {response}")
    return response


async def send_password_reset_email(to: str, reset_url: str) -> dict:
    """Send password reset email"""
    return await send_email(
        to=to,
        subject=f"{STORE_NAME} Password Recovery",
        mjml_content=password_reset_template(reset_url),
    )


async def send_order_status_email(to: str, order: OrderNotification) -> dict:
    """Send order status update matching the order's current status"""
    return await send_email(
        to=to,
        subject=generate_subject(order.order_status),
        mjml_content=order_status_template(order),
    )
