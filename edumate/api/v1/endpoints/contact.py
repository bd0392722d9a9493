import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from edumate.middlewares.rate_limit import limiter
from edumate.schemas.contact import ContactRequest
from edumate.services.email import send_contact_confirmation, send_contact_notification

router = APIRouter()
logger = logging.getLogger(__name__)

def _mask_email(value: str) -> str:
    try:
        local, domain = value.split("@", 1)
    except ValueError:
        return "***"
    if not local:
        return f"***@{domain}"
    return f"{local[:2]}***@{domain}"


@router.post("")
@limiter.limit("5/minute")
def submit_contact(request: Request, payload: ContactRequest):
    if not all([payload.name, payload.email, payload.subject, payload.message]):
        return JSONResponse(status_code=400, content={"error": "Missing required fields"})
    try:
        validate_email(payload.email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return JSONResponse(status_code=400, content={"error": "Invalid email format"})

    try:
        send_contact_notification(payload)
    except Exception as exc:
        logger.error("Contact notification failed from=%s: %s", _mask_email(payload.email), exc)
        return JSONResponse(status_code=500, content={"error": "Failed to send email"})

    try:
        send_contact_confirmation(payload)
    except Exception as exc:
        # Confirmation is best-effort.
        logger.warning("Contact confirmation failed to=%s: %s", _mask_email(payload.email), exc)

    return {"success": True, "message": "Message sent successfully"}
