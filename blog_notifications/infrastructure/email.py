"""Helpers for sending notification emails via SendGrid."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, To

from blog_notifications.config import get_settings
from blog_notifications.domain.entities import (
    DigestType,
    Notification,
    NotificationType,
    Recipient,
)

logger = logging.getLogger(__name__)

EmailSender = Callable[[Recipient, str, str], bool]
"""``(recipient, subject, html_content) -> delivered``"""

_DIGEST_LABELS = {
    DigestType.DAILY: "Daily",
    DigestType.WEEKLY: "Weekly",
}
_TYPE_LABELS = {
    NotificationType.SYSTEM: "System notifications",
    NotificationType.INTERACTION: "Interactions",
}


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_failure(status_code: Any, body: Any) -> None:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        logger.error("SendGrid request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid request failed: %s", details)
    else:
        logger.error("SendGrid request failed without details")


def send_email(recipient: Recipient, subject: str, html_content: str) -> bool:
    """Send an email to ``recipient`` using the configured SendGrid credentials.

    Returns ``False`` instead of raising when email is not configured or the
    API rejects the message.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email to %s", recipient.email)
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=To(recipient.email, recipient.name),
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        status_code = getattr(exc, "status_code", None)
        body = getattr(exc, "body", None)
        if status_code is None and body is None:
            logger.exception("Error sending email via SendGrid: %s", exc)
        else:
            _log_sendgrid_failure(status_code, body)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False

    return True


def _notification_link(notification: Notification, site_url: str) -> str | None:
    link = notification.related_data.get("link") if notification.related_data else None
    if not link:
        return None
    link = str(link)
    if link.startswith(("http://", "https://")):
        return link
    return f"{site_url.rstrip('/')}/{link.lstrip('/')}"


def _render_item(notification: Notification, site_url: str) -> str:
    parts = [f"<h3 style=\"margin:0 0 4px\">{escape(notification.title)}</h3>"]
    if notification.content:
        parts.append(f"<p style=\"margin:0 0 4px\">{escape(notification.content)}</p>")
    link = _notification_link(notification, site_url)
    if link:
        parts.append(f"<p style=\"margin:0\"><a href=\"{escape(link, quote=True)}\">View</a></p>")
    if notification.created_at:
        parts.append(
            "<p style=\"margin:0;color:#888;font-size:12px\">"
            f"{notification.created_at.strftime('%Y-%m-%d %H:%M')}</p>"
        )
    return "<div style=\"padding:12px 0;border-bottom:1px solid #eee\">" + "".join(parts) + "</div>"


def render_notification_email(
    notification: Notification, recipient: Recipient
) -> tuple[str, str]:
    """Return ``(subject, html)`` for a single realtime notification."""

    settings = get_settings()
    subject = f"[{settings.site_name}] {notification.title}"
    html_content = "".join(
        (
            f"<p>Hi {escape(recipient.name)},</p>",
            _render_item(notification, settings.site_url),
            "<p style=\"color:#888;font-size:12px\">"
            "You can change which emails you receive in your notification settings.</p>",
        )
    )
    return subject, html_content


def render_digest_email(
    recipient: Recipient,
    notifications: Sequence[Notification],
    digest_type: DigestType,
) -> tuple[str, str]:
    """Return ``(subject, html)`` for a digest grouping ``notifications`` by type."""

    settings = get_settings()
    label = _DIGEST_LABELS[DigestType(digest_type)]
    subject = f"[{settings.site_name}] {label} digest: {len(notifications)} new notifications"

    sections: list[str] = []
    for notification_type, heading in _TYPE_LABELS.items():
        items = [item for item in notifications if item.type == notification_type]
        if not items:
            continue
        sections.append(f"<h2>{escape(heading)} ({len(items)})</h2>")
        sections.extend(_render_item(item, settings.site_url) for item in items)

    html_content = "".join(
        (
            f"<p>Hi {escape(recipient.name)},</p>",
            f"<p>Here is your {label.lower()} summary from {escape(settings.site_name)}.</p>",
            *sections,
            "<p style=\"color:#888;font-size:12px\">"
            "You can change your digest schedule in your notification settings.</p>",
        )
    )
    return subject, html_content


__all__ = [
    "EmailSender",
    "render_digest_email",
    "render_notification_email",
    "send_email",
]
