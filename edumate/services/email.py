from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import parseaddr
from typing import Optional

import httpx

from edumate.core.config import get_settings, parse_email_list
from edumate.schemas.contact import ContactRequest


logger = logging.getLogger(__name__)


def _sanitize_email_from(value: str) -> str:
    # Env vars pasted into dashboards often keep their surrounding quotes; Resend rejects that.
    v = (value or "").strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        v = v[1:-1].strip()
    return v


def _parse_from(value: str) -> tuple[Optional[str], str]:
    """
    Accept either:
      - email@example.com
      - Name <email@example.com>
    Returns (name, email).
    """
    raw = _sanitize_email_from(value)
    name, email = parseaddr(raw)
    name = (name or "").strip() or None
    email = (email or "").strip()
    if not email:
        return None, raw.strip()
    return name, email


def _row(label: str, value: str) -> str:
    return (
        '<tr><td style="font-weight:600;color:#475569;padding:4px 12px 4px 0;">'
        f"{label}</td><td style=\"color:#1e293b;\">{html.escape(value)}</td></tr>"
    )


def _build_contact_notification_html(contact: ContactRequest) -> str:
    rows = [
        _row("Name:", contact.name or ""),
        _row("Email:", contact.email or ""),
    ]
    if contact.phone:
        rows.append(_row("Phone:", contact.phone))
    rows.append(_row("Inquiry Type:", (contact.type or "general").capitalize()))
    rows.append(_row("Subject:", contact.subject or ""))
    return f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #0f172a; max-width: 600px;">
      <h2 style="margin: 0 0 8px;">New Contact Form Submission</h2>
      <p style="margin: 0 0 14px; color: #64748b;">Someone has reached out to EduMate GH</p>
      <table style="background:#f1f5f9;border-radius:8px;padding:12px;">{''.join(rows)}</table>
      <div style="margin-top:16px;padding:12px;border-left:4px solid #3b82f6;white-space:pre-wrap;">{html.escape(contact.message or "")}</div>
      <p style="margin-top:16px;font-size:12px;color:#64748b;">
        Please respond to the user at: <a href="mailto:{html.escape(contact.email or "")}">{html.escape(contact.email or "")}</a>
      </p>
    </div>
    """.strip()


def _build_contact_confirmation_html(contact: ContactRequest) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #0f172a; max-width: 600px;">
      <h2 style="margin: 0 0 8px;">Thank you for contacting EduMate GH</h2>
      <p style="margin: 0 0 14px;">Hi {html.escape(contact.name or "there")},</p>
      <p style="margin: 0 0 14px;">
        We received your message about <strong>{html.escape(contact.subject or "")}</strong> and will get back to you shortly.
      </p>
      <p style="margin: 0; font-size: 13px; color: #475569;">The EduMate GH team</p>
    </div>
    """.strip()


def send_contact_notification(contact: ContactRequest) -> None:
    settings = get_settings()
    recipients = parse_email_list(settings.contact_recipients)
    if not recipients:
        raise ValueError("CONTACT_RECIPIENTS is empty")
    send_email(
        to_emails=recipients,
        subject=f"New Contact Form Submission: {contact.subject}",
        html=_build_contact_notification_html(contact),
        reply_to=contact.email,
    )


def send_contact_confirmation(contact: ContactRequest) -> None:
    send_email(
        to_emails=[(contact.email or "").strip()],
        subject="Thank you for contacting EduMate GH",
        html=_build_contact_confirmation_html(contact),
    )


def send_email(*, to_emails: list[str], subject: str, html: str, reply_to: Optional[str] = None) -> None:
    settings = get_settings()
    provider = (settings.email_provider or "console").lower()
    if provider == "console":
        # Dev/test default: nothing leaves the process.
        logger.info("[email][console] to=%s subject=%s", ",".join(to_emails), subject)
        return

    if provider == "resend":
        _send_via_resend(
            api_key=settings.resend_api_key,
            email_from=_sanitize_email_from(settings.email_from),
            to_emails=to_emails,
            subject=subject,
            html=html,
            reply_to=reply_to,
        )
        return

    if provider == "brevo":
        name, from_email = _parse_from(settings.email_from)
        _send_via_brevo(
            api_key=settings.brevo_api_key,
            from_name=name,
            from_email=from_email,
            to_emails=to_emails,
            subject=subject,
            html=html,
            reply_to=reply_to,
        )
        return

    if provider == "smtp":
        _send_via_smtp(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            email_from=_sanitize_email_from(settings.email_from),
            to_emails=to_emails,
            subject=subject,
            html=html,
            reply_to=reply_to,
        )
        return

    raise ValueError(f"Unsupported EMAIL_PROVIDER: {settings.email_provider}")


def _send_via_resend(
    *,
    api_key: Optional[str],
    email_from: str,
    to_emails: list[str],
    subject: str,
    html: str,
    reply_to: Optional[str] = None,
) -> None:
    if not api_key:
        raise ValueError("RESEND_API_KEY is required when EMAIL_PROVIDER=resend")

    payload = {
        "from": email_from,
        "to": to_emails,
        "subject": subject,
        "html": html,
    }
    if reply_to:
        payload["reply_to"] = reply_to
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    with httpx.Client(timeout=15) as client:
        res = client.post("https://api.resend.com/emails", json=payload, headers=headers)
        if res.status_code >= 400:
            raise RuntimeError(f"Resend error: {res.status_code} {res.text}")


def _send_via_brevo(
    *,
    api_key: Optional[str],
    from_name: Optional[str],
    from_email: str,
    to_emails: list[str],
    subject: str,
    html: str,
    reply_to: Optional[str] = None,
) -> None:
    if not api_key:
        raise ValueError("BREVO_API_KEY is required when EMAIL_PROVIDER=brevo")
    if not from_email:
        raise ValueError("EMAIL_FROM is required when EMAIL_PROVIDER=brevo")

    payload = {
        "sender": {"name": from_name or "EduMate GH", "email": from_email},
        "to": [{"email": email} for email in to_emails],
        "subject": subject,
        "htmlContent": html,
    }
    if reply_to:
        payload["replyTo"] = {"email": reply_to}
    headers = {"api-key": api_key, "Content-Type": "application/json", "Accept": "application/json"}
    with httpx.Client(timeout=15) as client:
        res = client.post("https://api.brevo.com/v3/smtp/email", json=payload, headers=headers)
        if res.status_code >= 400:
            raise RuntimeError(f"Brevo error: {res.status_code} {res.text}")


def _send_via_smtp(
    *,
    host: Optional[str],
    port: int,
    username: Optional[str],
    password: Optional[str],
    use_tls: bool,
    email_from: str,
    to_emails: list[str],
    subject: str,
    html: str,
    reply_to: Optional[str] = None,
) -> None:
    if not host:
        raise ValueError("SMTP_HOST is required when EMAIL_PROVIDER=smtp")

    msg = EmailMessage()
    msg["From"] = email_from
    msg["To"] = ", ".join(to_emails)
    msg["Subject"] = subject
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.set_content("Use an HTML-capable email client to view this message.")
    msg.add_alternative(html, subtype="html")

    with smtplib.SMTP(host, port, timeout=15) as server:
        server.ehlo()
        if use_tls:
            server.starttls()
            server.ehlo()
        if username and password:
            server.login(username, password)
        server.send_message(msg)
