"""
Payment verification pipeline.

``complete_paid_registration`` runs the steps of a checkout callback in
order: signature check, duplicate check, registration commit (which
issues the ticket).  Each step is a plain function call; only the view
speaks HTTP.  Once the signature is verified, money has been captured,
so every later failure is logged with the payment id and recorded as a
``PaymentIncident`` for an operator to refund or reconcile.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction

from common.errors import (
    ConflictError,
    DuplicateRegistration,
    NotFound,
    RegistrationIncomplete,
    SignatureMismatch,
    ValidationError,
)
from events.models import Event
from participants.models import Participant
from participants.services import commit_registration, normalize_email, participant_exists

from . import tasks
from .client import RazorpayClient
from .models import PaymentIncident

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentAssertion:
    """What the checkout callback claims about a payment."""

    order_id: str
    payment_id: str
    signature: str
    amount: Optional[Decimal] = None
    currency: str = "INR"


@dataclass(frozen=True)
class RegistrationOutcome:
    participant: Participant
    ticket: Optional[object] = None


def record_incident(reason: str, *, payment_id: str, order_id: str = "", event_id=None, email: str = "",
                    detail: str = "", payload: dict | None = None) -> PaymentIncident:
    incident = PaymentIncident.objects.create(
        payment_id=payment_id,
        order_id=order_id or "",
        event_id=event_id,
        email=email or "",
        reason=reason,
        detail=detail,
        payload=payload or {},
    )
    logger.error("Payment incident %s for payment %s: %s", reason, payment_id, detail or "-")
    return incident


def _safe_event_id(event_id):
    try:
        return Event.objects.filter(pk=int(event_id)).values_list("pk", flat=True).first()
    except (TypeError, ValueError):
        return None


def complete_paid_registration(
    client: RazorpayClient,
    assertion: PaymentAssertion,
    participant_data: dict,
    event_id,
) -> RegistrationOutcome:
    """
    Verify a checkout callback and register the participant.

    Raises:
        SignatureMismatch: the callback signature is not valid.
        DuplicateRegistration: the email is already registered for the
            event; the payment id is carried for the refund path.
        RegistrationIncomplete: payment verified but the registration
            could not be stored.
    """
    if not client.verify_signature(assertion.order_id, assertion.payment_id, assertion.signature):
        logger.warning("Signature mismatch for payment %s (order %s)", assertion.payment_id, assertion.order_id)
        raise SignatureMismatch()
    logger.info("Payment %s verified for order %s", assertion.payment_id, assertion.order_id)

    data = dict(participant_data or {})
    data.setdefault("eventId", event_id)
    email = normalize_email(data.get("email"))
    incident_args = {
        "payment_id": assertion.payment_id,
        "order_id": assertion.order_id,
        "event_id": _safe_event_id(data.get("eventId")),
        "email": email,
        "payload": {k: v for k, v in data.items() if k != "signature"},
    }

    try:
        participant = _register(assertion, data, incident_args)
    except (DuplicateRegistration, RegistrationIncomplete):
        raise
    except Exception as exc:
        logger.exception("Unexpected failure registering payment %s", assertion.payment_id)
        record_incident(
            PaymentIncident.REASON_REGISTRATION_FAILED,
            detail=f"{type(exc).__name__}: {exc}",
            **incident_args,
        )
        raise RegistrationIncomplete(payment_id=assertion.payment_id, reason="Unexpected error") from exc

    expected_amount = assertion.amount if assertion.amount is not None else participant.amount
    participant_id = participant.pk
    transaction.on_commit(
        lambda: tasks.reconcile_payment.delay(participant_id, str(expected_amount), assertion.currency)
    )

    ticket = getattr(participant, "ticket", None)
    return RegistrationOutcome(participant=participant, ticket=ticket)


def _register(assertion: PaymentAssertion, data: dict, incident_args: dict) -> Participant:
    if participant_exists(incident_args["email"], data.get("eventId")):
        record_incident(PaymentIncident.REASON_DUPLICATE, detail="Already registered before commit", **incident_args)
        raise DuplicateRegistration(payment_id=assertion.payment_id)

    payment_details = {
        "payment_id": assertion.payment_id,
        "order_id": assertion.order_id,
        "signature": assertion.signature,
    }
    try:
        return commit_registration(data, payment_details)
    except ConflictError:
        record_incident(PaymentIncident.REASON_DUPLICATE, detail="Lost a concurrent registration race", **incident_args)
        raise DuplicateRegistration(payment_id=assertion.payment_id)
    except (ValidationError, NotFound) as exc:
        record_incident(PaymentIncident.REASON_REGISTRATION_FAILED, detail=exc.message, **incident_args)
        raise RegistrationIncomplete(payment_id=assertion.payment_id, reason=exc.message) from exc
