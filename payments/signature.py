"""
Razorpay payment signature verification.

Checkout returns ``razorpay_order_id``, ``razorpay_payment_id`` and
``razorpay_signature``; the signature is the hex HMAC-SHA256 of
``"<order_id>|<payment_id>"`` keyed with the account's key secret.
"""
from __future__ import annotations

import hashlib
import hmac

from common.errors import ConfigurationError


def sign_payment(order_id: str, payment_id: str, secret: str) -> str:
    """Return the expected hex signature for an order/payment pair."""
    if not secret:
        raise ConfigurationError("Payment signing secret is not configured")
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=message.encode("utf-8"),
        digestmod=hashlib.sha256,
    ).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """
    Compare the supplied signature against the expected one in constant time.

    Returns False for any mismatch or missing identifier.  Only a missing
    secret raises (``ConfigurationError``).
    """
    expected = sign_payment(order_id or "", payment_id or "", secret)
    if not order_id or not payment_id or not signature:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
