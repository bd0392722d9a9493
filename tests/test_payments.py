import hashlib
import hmac
import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from edumate.models import PaymentStatus, PaymentTransaction, UserCoins
from edumate.services import payments as payment_service
from edumate.services.coins import credit_coins, get_coin_balance
from edumate.services.payments import generate_reference


PURCHASE = {
    "amount": 10000,
    "email": "a@b.com",
    "userId": "u1",
    "packageId": "p1",
    "coinAmount": 100,
}


def _initialize(client, **overrides) -> str:
    res = client.post("/api/v1/payments/initialize", json={**PURCHASE, **overrides})
    assert res.status_code == 200, res.text
    return res.json()["data"]["reference"]


def _verify(client, reference: str, user_id: str = "u1"):
    return client.post("/api/v1/payments/verify", json={"reference": reference, "userId": user_id})


def _record(db, reference: str) -> PaymentTransaction:
    db.expire_all()
    return db.query(PaymentTransaction).filter(PaymentTransaction.paystack_reference == reference).one()


def test_generate_reference_format():
    assert generate_reference("u1", now_ms=1700000000123) == "coin_purchase_u1_1700000000123"


def test_purchase_then_verify_then_reverify(client, db_session, gateway):
    res = client.post("/api/v1/payments/initialize", json=PURCHASE)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    reference = body["data"]["reference"]
    assert reference.startswith("coin_purchase_u1_")
    assert body["data"]["authorization_url"].endswith(reference)

    record = _record(db_session, reference)
    assert record.status == PaymentStatus.PENDING
    assert record.coin_amount == 100
    assert record.user_id == "u1"
    assert float(record.amount) == 100.0

    sent = json.loads(gateway.calls[0].content)
    assert sent["amount"] == 10000
    assert sent["callback_url"] == "https://edumategh.com/payment/callback"
    assert sent["metadata"] == {"userId": "u1", "packageId": "p1", "coinAmount": 100}

    res = _verify(client, reference)
    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "data": {
            "status": "success",
            "message": "Payment verified and coins added",
            "metadata": {"coinAmount": 100, "userId": "u1"},
        },
    }
    assert get_coin_balance(db_session, "u1") == 100
    record = _record(db_session, reference)
    assert record.status == PaymentStatus.COMPLETED
    assert record.completed_at is not None
    assert record.paystack_data["status"] == "success"

    res = _verify(client, reference)
    assert res.status_code == 200
    assert res.json()["data"]["message"] == "Payment already processed"
    assert get_coin_balance(db_session, "u1") == 100


def test_metadata_is_forwarded_and_purchase_fields_win(client, gateway):
    _initialize(client, metadata={"source": "android", "coinAmount": 999})
    sent = json.loads(gateway.calls[0].content)
    assert sent["metadata"]["source"] == "android"
    assert sent["metadata"]["coinAmount"] == 100


def test_verify_adds_to_existing_balance(client, db_session):
    db_session.add(UserCoins(user_id="u1", coin_balance=40))
    db_session.commit()

    reference = _initialize(client)
    assert _verify(client, reference).status_code == 200
    assert get_coin_balance(db_session, "u1") == 140
    assert db_session.query(UserCoins).filter(UserCoins.user_id == "u1").count() == 1


def test_unsuccessful_verification_marks_failed_and_leaves_balances(client, db_session, gateway):
    reference = _initialize(client)
    gateway.verify_status = "failed"
    gateway.verify_gateway_response = "Declined"

    res = _verify(client, reference)
    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "message": "Payment was not successful",
        "data": {"status": "failed", "gateway_response": "Declined"},
    }
    assert _record(db_session, reference).status == PaymentStatus.FAILED
    assert db_session.query(UserCoins).count() == 0


def test_unsuccessful_verification_never_downgrades_completed(client, db_session, gateway):
    reference = _initialize(client)
    assert _verify(client, reference).status_code == 200

    gateway.verify_status = "abandoned"
    assert _verify(client, reference).status_code == 400
    assert _record(db_session, reference).status == PaymentStatus.COMPLETED
    assert get_coin_balance(db_session, "u1") == 100


def test_success_after_failed_verification_is_refused(client, db_session, gateway):
    reference = _initialize(client)
    gateway.verify_status = "failed"
    assert _verify(client, reference).status_code == 400

    gateway.verify_status = "success"
    res = _verify(client, reference)
    assert res.status_code == 409
    assert res.json()["success"] is False
    assert res.json()["message"] == "Payment was already marked failed"
    assert _record(db_session, reference).status == PaymentStatus.FAILED
    assert get_coin_balance(db_session, "u1") == 0


@pytest.mark.parametrize("missing", ["amount", "email", "userId", "packageId", "coinAmount"])
def test_initialize_missing_field_is_400_without_gateway_call(client, gateway, db_session, missing):
    payload = {key: value for key, value in PURCHASE.items() if key != missing}
    res = client.post("/api/v1/payments/initialize", json=payload)
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Missing required fields"}
    assert gateway.calls == []
    assert db_session.query(PaymentTransaction).count() == 0


def test_initialize_rejects_negative_amount(client, gateway):
    res = client.post("/api/v1/payments/initialize", json={**PURCHASE, "amount": -5})
    assert res.status_code == 400
    assert gateway.calls == []


def test_initialize_surfaces_gateway_message(client, gateway, db_session):
    gateway.initialize_response = (400, {"status": False, "message": "Invalid Email Address Passed"})
    res = client.post("/api/v1/payments/initialize", json=PURCHASE)
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Invalid Email Address Passed"}
    assert db_session.query(PaymentTransaction).count() == 0


def test_initialize_passes_gateway_rate_limit_through(client, gateway):
    gateway.initialize_response = (429, {"status": False, "message": "Too many requests"})
    res = client.post("/api/v1/payments/initialize", json=PURCHASE)
    assert res.status_code == 429


@pytest.mark.parametrize("payload", [{"reference": "coin_purchase_u1_1"}, {"userId": "u1"}, {}])
def test_verify_missing_fields_is_400(client, gateway, payload):
    res = client.post("/api/v1/payments/verify", json=payload)
    assert res.status_code == 400
    assert res.json()["message"] == "Reference and userId are required"
    assert gateway.calls == []


def test_verify_unknown_reference_is_404(client):
    res = _verify(client, "coin_purchase_u1_42")
    assert res.status_code == 404
    assert res.json()["message"] == "Payment record not found"


def test_verify_with_other_user_does_not_credit(client, db_session):
    reference = _initialize(client)
    res = _verify(client, reference, user_id="u2")
    assert res.status_code == 404
    assert db_session.query(UserCoins).count() == 0
    assert _record(db_session, reference).status == PaymentStatus.PENDING


def test_failed_credit_rolls_back_completion(client, db_session, monkeypatch):
    reference = _initialize(client)

    def _broken_credit(db, user_id, quantity):
        raise SQLAlchemyError("balance write failed")

    monkeypatch.setattr(payment_service, "credit_coins", _broken_credit)
    res = _verify(client, reference)
    assert res.status_code == 500
    assert res.json()["message"] == "Failed to add coins to account"
    assert _record(db_session, reference).status == PaymentStatus.PENDING

    monkeypatch.setattr(payment_service, "credit_coins", credit_coins)
    res = _verify(client, reference)
    assert res.status_code == 200
    assert res.json()["data"]["message"] == "Payment verified and coins added"
    assert get_coin_balance(db_session, "u1") == 100


@pytest.mark.parametrize("path", ["/api/v1/payments/initialize", "/api/v1/payments/verify"])
def test_get_is_method_not_allowed(client, path):
    res = client.get(path)
    assert res.status_code == 405
    assert res.json() == {"message": "Method not allowed"}


def test_credit_coins_rejects_non_positive(db_session):
    with pytest.raises(ValueError):
        credit_coins(db_session, "u1", 0)


def test_credit_coins_creates_then_increments(db_session):
    credit_coins(db_session, "u9", 25)
    db_session.commit()
    assert get_coin_balance(db_session, "u9") == 25
    credit_coins(db_session, "u9", 5)
    db_session.commit()
    assert get_coin_balance(db_session, "u9") == 30


def _signed(body: dict) -> tuple[bytes, dict]:
    raw = json.dumps(body).encode()
    signature = hmac.new(b"whsec_test_xxx", raw, hashlib.sha512).hexdigest()
    return raw, {"x-paystack-signature": signature, "content-type": "application/json"}


def test_webhook_rejects_missing_or_bad_signature(client):
    raw = json.dumps({"event": "charge.success", "data": {"reference": "x"}}).encode()
    res = client.post("/api/v1/payments/webhook", content=raw)
    assert res.status_code == 401
    res = client.post("/api/v1/payments/webhook", content=raw, headers={"x-paystack-signature": "bad"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid signature"


def test_webhook_charge_success_credits_once(client, db_session):
    reference = _initialize(client)
    raw, headers = _signed({"event": "charge.success", "data": {"reference": reference, "status": "success"}})

    for _ in range(2):
        res = client.post("/api/v1/payments/webhook", content=raw, headers=headers)
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    assert _record(db_session, reference).status == PaymentStatus.COMPLETED
    assert get_coin_balance(db_session, "u1") == 100

    # A later client-side verify sees the webhook's settlement.
    assert _verify(client, reference).json()["data"]["message"] == "Payment already processed"


def test_webhook_charge_failed_marks_failed(client, db_session):
    reference = _initialize(client)
    raw, headers = _signed({"event": "charge.failed", "data": {"reference": reference}})
    assert client.post("/api/v1/payments/webhook", content=raw, headers=headers).status_code == 200
    assert _record(db_session, reference).status == PaymentStatus.FAILED


def test_webhook_unknown_reference_is_acknowledged(client, db_session):
    raw, headers = _signed({"event": "charge.success", "data": {"reference": "nope"}})
    assert client.post("/api/v1/payments/webhook", content=raw, headers=headers).status_code == 200
    assert db_session.query(UserCoins).count() == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"event": "charge.success", "data": ["x"]},
        {"event": "charge.success", "data": "ref"},
        {"event": "charge.success"},
        ["charge.success"],
    ],
)
def test_webhook_rejects_malformed_payload(client, db_session, payload):
    raw, headers = _signed(payload)
    res = client.post("/api/v1/payments/webhook", content=raw, headers=headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid payload"
    assert db_session.query(UserCoins).count() == 0


def test_webhook_rejects_signed_non_json_body(client):
    raw = b"event=charge.success"
    signature = hmac.new(b"whsec_test_xxx", raw, hashlib.sha512).hexdigest()
    res = client.post("/api/v1/payments/webhook", content=raw, headers={"x-paystack-signature": signature})
    assert res.status_code == 400


def test_webhook_success_after_failure_does_not_credit(client, db_session):
    reference = _initialize(client)
    raw, headers = _signed({"event": "charge.failed", "data": {"reference": reference}})
    assert client.post("/api/v1/payments/webhook", content=raw, headers=headers).status_code == 200

    raw, headers = _signed({"event": "charge.success", "data": {"reference": reference}})
    assert client.post("/api/v1/payments/webhook", content=raw, headers=headers).status_code == 200
    assert _record(db_session, reference).status == PaymentStatus.FAILED
    assert db_session.query(UserCoins).count() == 0
