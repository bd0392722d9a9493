import hashlib
import hmac
import logging
import time
from urllib.parse import quote

import httpx

from edumate.core.config import Settings


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.paystack.co"


class PaystackError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None, raw: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.raw = raw


class PaystackClient:
    """Thin wrapper over the Paystack transaction API.

    Built per request from settings by ``get_paystack_client``. ``transport`` is
    passed straight to ``httpx.Client``.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        webhook_secret: str | None = None,
        timeout: float = 15,
        transport: httpx.BaseTransport | None = None,
    ):
        self.secret_key = secret_key
        self.base_url = str(base_url or DEFAULT_BASE_URL).rstrip("/")
        self.webhook_secret = webhook_secret
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaystackClient":
        return cls(
            settings.paystack_secret_key,
            base_url=str(settings.paystack_base_url),
            webhook_secret=settings.paystack_webhook_secret,
            timeout=settings.paystack_timeout_seconds,
        )

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.secret_key}", "Content-Type": "application/json"}

    def _request(self, method: str, path: str, *, payload: dict | None = None, default_message: str) -> dict:
        url = f"{self.base_url}{path}"
        start = time.time()
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, json=payload, headers=self._headers())
        except (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError) as exc:
            raise PaystackError("Unable to reach payment gateway.", raw=str(exc)) from exc

        duration_ms = round((time.time() - start) * 1000, 2)
        logger.info("Paystack %s %s status=%s duration=%sms", method, path.split("/")[1], response.status_code, duration_ms)

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise PaystackError(
                "Payment gateway returned an invalid response.",
                status_code=response.status_code,
                raw=response.text[:300],
            )

        # Paystack reports failures with `status: false` and a human readable `message`,
        # sometimes alongside a 2xx code.
        if response.status_code >= 400 or not body.get("status"):
            message = str(body.get("message") or "").strip() or default_message
            raise PaystackError(message, status_code=response.status_code, raw=response.text[:300])

        data = body.get("data")
        return data if isinstance(data, dict) else {}

    def initialize_transaction(
        self,
        *,
        email: str,
        amount: int,
        reference: str,
        callback_url: str,
        metadata: dict | None = None,
    ) -> dict:
        payload = {
            "email": email,
            "amount": amount,
            "reference": reference,
            "callback_url": callback_url,
            "metadata": metadata or {},
        }
        return self._request(
            "POST",
            "/transaction/initialize",
            payload=payload,
            default_message="Payment initialization failed",
        )

    def verify_transaction(self, reference: str) -> dict:
        return self._request(
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            default_message="Payment verification failed",
        )

    def verify_signature(self, body: bytes, signature: str) -> bool:
        secret = self.webhook_secret or self.secret_key
        computed = hmac.new(secret.encode(), body, hashlib.sha512).hexdigest()
        return hmac.compare_digest(computed, signature or "")
