"""
Celery tasks for the payments app.

``reconcile_payment`` runs after a registration has been committed.  It
asks Razorpay what actually happened to the payment and records a
``PaymentIncident`` when the payment is not captured or the captured
amount differs from what the registration was charged.  Provider
timeouts only delay this task; they never affect the registration.
"""
from __future__ import annotations

import logging

from celery import shared_task

from common.errors import ConfigurationError, PaymentProviderError
from participants.models import Participant

from .client import RazorpayClient, to_subunits
from .models import PaymentIncident

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=5, default_retry_delay=120)
def reconcile_payment(self, participant_id: int, expected_amount: str, currency: str = "INR") -> str | None:
    participant = Participant.objects.filter(pk=participant_id).first()
    if participant is None or not participant.payment_id:
        return None

    try:
        client = RazorpayClient.from_settings()
        payment = client.fetch_payment(participant.payment_id)
    except ConfigurationError:
        logger.error("Cannot reconcile payment %s: Razorpay is not configured", participant.payment_id)
        return None
    except PaymentProviderError as exc:
        raise self.retry(exc=exc)

    status = payment.get("status")
    base = {
        "payment_id": participant.payment_id,
        "order_id": participant.order_id,
        "event_id": participant.event_id,
        "email": participant.email,
        "payload": payment,
    }
    if status != "captured":
        PaymentIncident.objects.create(
            reason=PaymentIncident.REASON_NOT_CAPTURED,
            detail=f"Provider status is {status!r}",
            **base,
        )
        logger.error("Payment %s for participant %s is %s", participant.payment_id, participant_id, status)
        return status

    expected = to_subunits(expected_amount)
    if payment.get("amount") != expected or (payment.get("currency") or currency) != currency:
        PaymentIncident.objects.create(
            reason=PaymentIncident.REASON_AMOUNT_MISMATCH,
            detail=f"Expected {expected} {currency}, provider reports {payment.get('amount')} {payment.get('currency')}",
            **base,
        )
        logger.error("Amount mismatch on payment %s", participant.payment_id)
        return "amount_mismatch"

    logger.info("Payment %s reconciled", participant.payment_id)
    return status
