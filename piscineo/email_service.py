"""
Email Service using SMTP (when configured) or Resend (fallback)
HTML bodies are written in MJML and compiled before sending
"""

import logging
import smtplib
import ssl
from datetime import datetime, timezone
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config

logger = logging.getLogger(__name__)

# Initialize Resend as fallback
resend.api_key = config.RESEND_API_KEY


class EmailNotConfiguredError(Exception):
    """Raised when neither SMTP nor Resend is configured"""

    pass


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        errors = getattr(result, "errors", None)
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        return getattr(result, "html", None) or str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


def build_message(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
    text_content: Optional[str] = None,
    attachments: Optional[list[dict]] = None,
) -> MIMEMultipart:
    """
    Build a multipart message: text/html alternatives plus attachments.

    Attachments are dicts with "filename", "content" (bytes) and an optional
    "content_type" (defaults to application/octet-stream).
    """
    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = from_address
    msg["To"] = ", ".join(to)

    body = MIMEMultipart("alternative")
    if text_content:
        body.attach(MIMEText(text_content, "plain", "utf-8"))
    body.attach(MIMEText(html_content, "html", "utf-8"))
    msg.attach(body)

    for attachment in attachments or []:
        content_type = attachment.get("content_type") or "application/octet-stream"
        maintype, _, subtype = content_type.partition("/")
        if maintype != "application":
            subtype = "octet-stream"
        part = MIMEApplication(attachment["content"], _subtype=subtype or "octet-stream")
        part.add_header("Content-Disposition", "attachment", filename=attachment["filename"])
        msg.attach(part)

    return msg


def send_via_smtp(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
    text_content: Optional[str] = None,
    attachments: Optional[list[dict]] = None,
) -> dict:
    """Send email via the configured SMTP server"""
    host = config.EMAIL_SERVER_HOST
    port = config.EMAIL_SERVER_PORT or 587

    try:
        msg = build_message(to, subject, html_content, from_address, text_content, attachments)

        if port == 465 or config.EMAIL_SERVER_SECURE:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(host, port, context=context, timeout=30)
        else:
            server = smtplib.SMTP(host, port, timeout=30)
            if config.EMAIL_SERVER_USE_TLS:
                context = ssl.create_default_context()
                server.starttls(context=context)

        try:
            if config.EMAIL_SERVER_USER:
                server.login(config.EMAIL_SERVER_USER, config.EMAIL_SERVER_PASSWORD or "")
            server.sendmail(parseaddr(from_address)[1], to, msg.as_string())
        finally:
            server.quit()

        logger.info(f"✅ SMTP email sent successfully via {host}")
        return {"id": f"smtp-{datetime.now(timezone.utc).timestamp()}", "success": True}

    except Exception as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise Exception(f"SMTP failed: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    text_content: Optional[str] = None,
    from_address: Optional[str] = None,
    attachments: Optional[list[dict]] = None,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend (fallback)

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        text_content: Optional plain-text alternative
        from_address: Optional custom from address
        attachments: Optional list of {"filename", "content", "content_type"}

    Returns:
        Send response dict
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or config.EMAIL_FROM_ADDRESS

    if config.EMAIL_SERVER_HOST:
        try:
            logger.info(f"📧 Sending email via SMTP: {config.EMAIL_SERVER_HOST}")
            return send_via_smtp(
                to=recipients,
                subject=subject,
                html_content=html_content,
                from_address=sender,
                text_content=text_content,
                attachments=attachments,
            )
        except Exception as e:
            logger.warning(f"⚠️ SMTP failed, falling back to Resend: {e}")

    if not config.RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing and SMTP unavailable")
        raise EmailNotConfiguredError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        email_data = {
            "from": sender,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        if text_content:
            email_data["text"] = text_content

        if attachments:
            email_data["attachments"] = [
                {
                    "filename": attachment["filename"],
                    "content": list(attachment["content"]),
                    "content_type": attachment.get("content_type") or "application/octet-stream",
                }
                for attachment in attachments
            ]

        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e
