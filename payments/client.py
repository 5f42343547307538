"""
Razorpay REST client.

One instance is built per use (``RazorpayClient.from_settings()``) and
passed to whatever needs it.  The key secret is required up front since
it is all signature verification needs; the key id is only checked once
the client talks to the API or hands it to checkout.  Every transport
or HTTP failure surfaces as ``PaymentProviderError``.
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings

from common.errors import ConfigurationError, PaymentProviderError, ValidationError

from .signature import verify_payment_signature

logger = logging.getLogger(__name__)

RAZORPAY_BASE_URL = "https://api.razorpay.com/v1"


def to_subunits(amount) -> int:
    """Convert a rupee amount (str, int, float or Decimal) to paise."""
    try:
        value = Decimal(str(amount))
    except (ArithmeticError, ValueError) as exc:
        raise ValidationError("Invalid amount") from exc
    if not value.is_finite() or value <= 0:
        raise ValidationError("Invalid amount")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayClient:
    """Minimal Razorpay Orders/Payments client."""

    def __init__(self, key_id: str, key_secret: str, *, base_url: str | None = None, timeout: float = 10,
                 session: requests.Session | None = None) -> None:
        if not key_secret:
            raise ConfigurationError("Razorpay key secret is not configured")
        key_id = key_id or ""
        self._key_id = key_id
        self._key_secret = key_secret
        self.base_url = (base_url or RAZORPAY_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (key_id, key_secret)
        mode = "test" if key_id.startswith("rzp_test") else "live" if key_id.startswith("rzp_live") else "unknown"
        logger.info("Razorpay client initialised in %s mode", mode)

    @classmethod
    def from_settings(cls) -> "RazorpayClient":
        return cls(
            settings.RAZORPAY_KEY_ID,
            settings.RAZORPAY_KEY_SECRET,
            base_url=getattr(settings, "RAZORPAY_API_BASE", RAZORPAY_BASE_URL),
            timeout=getattr(settings, "RAZORPAY_TIMEOUT", 10),
        )

    @property
    def key_id(self) -> str:
        if not self._key_id:
            raise ConfigurationError("Razorpay key id is not configured")
        return self._key_id

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(order_id, payment_id, signature, self._key_secret)

    def create_order(self, amount, currency: str = "INR", receipt: str | None = None,
                     notes: dict | None = None) -> dict:
        """Create an order; ``amount`` is in rupees and sent in paise."""
        payload = {"amount": to_subunits(amount), "currency": currency}
        if receipt:
            payload["receipt"] = receipt
        if notes:
            payload["notes"] = notes
        order = self._request("POST", "/orders", json=payload)
        logger.info("Razorpay order %s created (%s %s)", order.get("id"), payload["amount"], currency)
        return order

    def fetch_payment(self, payment_id: str) -> dict:
        if not payment_id:
            raise ValidationError("Payment id is required")
        return self._request("GET", f"/payments/{payment_id}")

    def _request(self, method: str, path: str, **kwargs) -> dict:
        if not self._key_id:
            raise ConfigurationError("Razorpay key id is not configured")
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            body = exc.response.text if exc.response is not None else ""
            logger.error("Razorpay %s %s failed: %s %s", method, path, exc, body)
            raise PaymentProviderError() from exc
        except ValueError as exc:
            logger.error("Razorpay %s %s returned a non-JSON body", method, path)
            raise PaymentProviderError() from exc
