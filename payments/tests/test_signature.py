"""
Tests for Razorpay callback signature verification.
"""
import hashlib
import hmac

import pytest

from common.errors import ConfigurationError
from payments.signature import sign_payment, verify_payment_signature

SECRET = "test_key_secret"


def test_valid_signature_verifies():
    order_id, payment_id = "order_9A33XWu170gUtm", "pay_29QQoUBi66xm2f"
    expected = hmac.new(SECRET.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()
    assert sign_payment(order_id, payment_id, SECRET) == expected
    assert verify_payment_signature(order_id, payment_id, expected, SECRET) is True


@pytest.mark.parametrize("order_id,payment_id", [("order_1", "pay_1"), ("o", "p"), ("order_ü", "pay_✓")])
def test_any_single_bit_flip_is_rejected(order_id, payment_id):
    signature = sign_payment(order_id, payment_id, SECRET)
    for index, char in enumerate(signature):
        for bit in range(8):
            mutated = signature[:index] + chr(ord(char) ^ (1 << bit)) + signature[index + 1:]
            assert verify_payment_signature(order_id, payment_id, mutated, SECRET) is False


def test_signature_for_other_payment_is_rejected():
    signature = sign_payment("order_1", "pay_1", SECRET)
    assert verify_payment_signature("order_1", "pay_2", signature, SECRET) is False
    assert verify_payment_signature("order_1", "pay_1", signature, "other-secret") is False


@pytest.mark.parametrize("order_id,payment_id,signature", [("", "pay_1", "x"), ("order_1", "", "x"), ("order_1", "pay_1", "")])
def test_missing_fields_return_false(order_id, payment_id, signature):
    assert verify_payment_signature(order_id, payment_id, signature, SECRET) is False


def test_missing_secret_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        verify_payment_signature("order_1", "pay_1", "abc", "")
