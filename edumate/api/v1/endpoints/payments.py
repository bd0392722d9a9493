import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from edumate.core.config import get_settings
from edumate.core.database import get_db
from edumate.dependencies import get_paystack_client
from edumate.middlewares.rate_limit import limiter
from edumate.schemas.payments import InitializePaymentRequest, VerifyPaymentRequest
from edumate.services.payments import handle_webhook_event, initialize_payment, verify_payment
from edumate.services.paystack import PaystackClient


settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


def _method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"message": "Method not allowed"})


@router.post("/initialize")
@limiter.limit("10/minute")
def initialize(
    request: Request,
    payload: InitializePaymentRequest,
    db: Session = Depends(get_db),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    callback_url = f"{settings.frontend_base_url.rstrip('/')}/payment/callback"
    return initialize_payment(db, paystack, payload, callback_url=callback_url)


@router.get("/initialize", include_in_schema=False)
def initialize_get():
    return _method_not_allowed()


@router.post("/verify")
@limiter.limit("30/minute")
def verify(
    request: Request,
    payload: VerifyPaymentRequest,
    db: Session = Depends(get_db),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    return verify_payment(db, paystack, payload)


@router.get("/verify", include_in_schema=False)
def verify_get():
    return _method_not_allowed()


@router.post("/webhook")
async def paystack_webhook(
    request: Request,
    db: Session = Depends(get_db),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    signature = request.headers.get("x-paystack-signature")
    if not signature:
        raise HTTPException(status_code=401, detail="Missing signature")

    body = await request.body()
    if not paystack.verify_signature(body, signature):
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        logger.warning("Webhook rejected: malformed payload")
        raise HTTPException(status_code=400, detail="Invalid payload")

    handle_webhook_event(db, payload.get("event"), data)
    return {"status": "ok"}
