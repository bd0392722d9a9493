import hashlib
import hmac
import json

import httpx
import pytest

from edumate.core.config import get_settings
from edumate.services.paystack import PaystackClient, PaystackError


def _client(handler, **kwargs) -> PaystackClient:
    return PaystackClient("sk_test_xxx", transport=httpx.MockTransport(handler), **kwargs)


def test_paystack_signature():
    settings = get_settings()
    client = PaystackClient.from_settings(settings)
    body = json.dumps({"event": "charge.success", "data": {"reference": "ABC"}}).encode()
    signature = hmac.new(settings.paystack_webhook_secret.encode(), body, hashlib.sha512).hexdigest()
    assert client.verify_signature(body, signature)
    assert not client.verify_signature(body, "0" * 128)
    assert not client.verify_signature(body + b" ", signature)


def test_signature_falls_back_to_secret_key():
    client = PaystackClient("sk_test_xxx")
    body = b'{"event":"charge.success"}'
    signature = hmac.new(b"sk_test_xxx", body, hashlib.sha512).hexdigest()
    assert client.verify_signature(body, signature)


def test_from_settings_strips_trailing_slash():
    client = PaystackClient.from_settings(get_settings())
    assert not client.base_url.endswith("/")


def test_initialize_sends_bearer_and_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"status": True, "data": {"authorization_url": "https://checkout.paystack.com/x", "reference": "ref-1"}},
        )

    data = _client(handler).initialize_transaction(
        email="a@b.com",
        amount=10000,
        reference="ref-1",
        callback_url="https://edumategh.com/payment/callback",
        metadata={"coinAmount": 100},
    )

    assert data["reference"] == "ref-1"
    assert seen["auth"] == "Bearer sk_test_xxx"
    assert seen["url"] == "https://api.paystack.co/transaction/initialize"
    assert seen["body"]["amount"] == 10000
    assert seen["body"]["metadata"] == {"coinAmount": 100}


def test_verify_quotes_reference():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(200, json={"status": True, "data": {"status": "success"}})

    assert _client(handler).verify_transaction("ref/with space")["status"] == "success"
    assert seen["raw_path"] == b"/transaction/verify/ref%2Fwith%20space"


def test_status_false_raises_with_gateway_message():
    def handler(request):
        return httpx.Response(200, json={"status": False, "message": "Duplicate Transaction Reference"})

    with pytest.raises(PaystackError) as exc:
        _client(handler).verify_transaction("ref-1")
    assert exc.value.message == "Duplicate Transaction Reference"
    assert exc.value.status_code == 200


def test_error_status_passes_code_through():
    def handler(request):
        return httpx.Response(401, json={"status": False, "message": "Invalid key"})

    with pytest.raises(PaystackError) as exc:
        _client(handler).verify_transaction("ref-1")
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid key"


def test_error_without_message_uses_default():
    def handler(request):
        return httpx.Response(500, json={"status": False})

    with pytest.raises(PaystackError) as exc:
        _client(handler).initialize_transaction(email="a@b.com", amount=1, reference="r", callback_url="https://x")
    assert exc.value.message == "Payment initialization failed"


def test_non_json_response_raises():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(PaystackError) as exc:
        _client(handler).verify_transaction("ref-1")
    assert exc.value.message == "Payment gateway returned an invalid response."


def test_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaystackError) as exc:
        _client(handler).verify_transaction("ref-1")
    assert exc.value.message == "Unable to reach payment gateway."
    assert exc.value.status_code is None
