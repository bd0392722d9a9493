import logging
import time
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from edumate.models import PaymentTransaction, PaymentStatus
from edumate.schemas.payments import InitializePaymentRequest, VerifyPaymentRequest
from edumate.services.coins import credit_coins
from edumate.services.paystack import PaystackClient, PaystackError


logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "coin_purchase"


class PaymentError(Exception):
    def __init__(self, message: str, status_code: int = 500, data: dict | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_reference(user_id: str, now_ms: int | None = None) -> str:
    # Not collision-proof: two requests for one user inside the same millisecond share it.
    # The unique column turns that into a persistence error rather than a shared record.
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{REFERENCE_PREFIX}_{user_id}_{now_ms}"


def _gateway_status(exc: PaystackError) -> int:
    if exc.status_code in (401, 429):
        return exc.status_code
    return 500


def _success_body(record: PaymentTransaction, message: str) -> dict:
    return {
        "success": True,
        "data": {
            "status": "success",
            "message": message,
            "metadata": {"coinAmount": record.coin_amount, "userId": record.user_id},
        },
    }


def initialize_payment(
    db: Session,
    paystack: PaystackClient,
    payload: InitializePaymentRequest,
    *,
    callback_url: str,
) -> dict:
    if not all([payload.amount, payload.email, payload.user_id, payload.package_id, payload.coin_amount]):
        raise PaymentError("Missing required fields", status_code=400)
    if payload.amount < 0 or payload.coin_amount < 0:
        raise PaymentError("Amount and coinAmount must be positive", status_code=400)

    reference = generate_reference(payload.user_id)
    metadata = {
        **(payload.metadata or {}),
        "userId": payload.user_id,
        "packageId": payload.package_id,
        "coinAmount": payload.coin_amount,
    }

    try:
        gateway_data = paystack.initialize_transaction(
            email=payload.email,
            amount=payload.amount,
            reference=reference,
            callback_url=callback_url,
            metadata=metadata,
        )
    except PaystackError as exc:
        logger.warning("Payment initialization rejected user=%s status=%s: %s", payload.user_id, exc.status_code, exc.message)
        raise PaymentError(exc.message, status_code=_gateway_status(exc)) from exc

    gateway_reference = gateway_data.get("reference") or reference
    record = PaymentTransaction(
        reference=reference,
        paystack_reference=gateway_reference,
        user_id=payload.user_id,
        # Stored in major units; the gateway works in kobo.
        amount=Decimal(payload.amount) / Decimal(100),
        coin_amount=payload.coin_amount,
        package_id=payload.package_id,
        status=PaymentStatus.PENDING,
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        # The gateway transaction is already open at this point; nothing can settle it locally.
        logger.error("Failed to store payment record reference=%s: %s", gateway_reference, exc)
        raise PaymentError("Failed to store payment record", status_code=500) from exc

    logger.info("Payment initialized reference=%s user=%s coins=%s", gateway_reference, payload.user_id, payload.coin_amount)
    return {
        "success": True,
        "data": {
            "reference": gateway_reference,
            "authorization_url": gateway_data.get("authorization_url"),
        },
    }


def complete_payment(db: Session, record: PaymentTransaction, gateway_data: dict) -> bool:
    """Mark ``record`` completed and credit its coins in one commit.

    Only pending records settle; returns False for completed or failed ones. On a
    database error the whole unit is rolled back, leaving the record pending so a
    later verify can retry.
    """
    if record.status != PaymentStatus.PENDING:
        return False
    try:
        record.status = PaymentStatus.COMPLETED
        record.completed_at = _utcnow()
        record.paystack_data = gateway_data
        credit_coins(db, record.user_id, int(record.coin_amount))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to settle payment reference=%s user=%s: %s", record.paystack_reference, record.user_id, exc)
        raise PaymentError("Failed to add coins to account", status_code=500) from exc
    logger.info("Payment completed reference=%s user=%s coins=%s", record.paystack_reference, record.user_id, record.coin_amount)
    return True


def fail_payment(db: Session, record: PaymentTransaction, gateway_data: dict) -> bool:
    if record.status != PaymentStatus.PENDING:
        return False
    try:
        record.status = PaymentStatus.FAILED
        record.completed_at = _utcnow()
        record.paystack_data = gateway_data
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to mark payment failed reference=%s: %s", record.paystack_reference, exc)
        return False
    return True


def _locked_record(db: Session, reference: str, user_id: str | None = None) -> PaymentTransaction | None:
    query = db.query(PaymentTransaction).filter(PaymentTransaction.paystack_reference == reference)
    if user_id is not None:
        query = query.filter(PaymentTransaction.user_id == user_id)
    return query.with_for_update().first()


def verify_payment(db: Session, paystack: PaystackClient, payload: VerifyPaymentRequest) -> dict:
    if not payload.reference or not payload.user_id:
        raise PaymentError("Reference and userId are required", status_code=400)

    try:
        gateway_data = paystack.verify_transaction(payload.reference)
    except PaystackError as exc:
        logger.warning("Payment verification error reference=%s status=%s: %s", payload.reference, exc.status_code, exc.message)
        raise PaymentError(exc.message, status_code=_gateway_status(exc)) from exc

    gateway_status = gateway_data.get("status")
    try:
        record = _locked_record(db, payload.reference, payload.user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Payment record lookup failed reference=%s: %s", payload.reference, exc)
        raise PaymentError("Failed to load payment record", status_code=500) from exc

    if gateway_status == "success":
        if not record:
            raise PaymentError("Payment record not found", status_code=404)
        if record.status == PaymentStatus.FAILED:
            logger.warning("Success reported for failed payment reference=%s user=%s", payload.reference, payload.user_id)
            raise PaymentError("Payment was already marked failed", status_code=409)
        if not complete_payment(db, record, gateway_data):
            return _success_body(record, "Payment already processed")
        return _success_body(record, "Payment verified and coins added")

    if record:
        fail_payment(db, record, gateway_data)
    else:
        logger.warning("Unsuccessful payment for unknown reference=%s user=%s", payload.reference, payload.user_id)
    raise PaymentError(
        "Payment was not successful",
        status_code=400,
        data={"status": gateway_status, "gateway_response": gateway_data.get("gateway_response")},
    )


def handle_webhook_event(db: Session, event: str | None, data: dict) -> None:
    reference = data.get("reference")
    if not reference or event not in ("charge.success", "charge.failed"):
        return

    record = _locked_record(db, reference)
    if not record:
        logger.info("Webhook %s for unknown reference=%s ignored", event, reference)
        db.rollback()
        return

    if event == "charge.success":
        if not complete_payment(db, record, data):
            logger.info("Webhook charge.success for %s reference=%s ignored", record.status.value, reference)
            db.rollback()
    else:
        fail_payment(db, record, data)
