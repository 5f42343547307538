"""
Registration services for the participants app.

``participant_exists`` is the cheap pre-check run before a registration
is committed; the ``uniq_participant_email_per_event`` constraint is what
actually guarantees one row per (email, event), so a lost race shows up
here as ``ConflictError``.

``commit_registration`` persists a paid registration and then issues the
ticket.  Once the participant row is committed it stays: a ticket
failure is logged and retried by ``tickets.tasks.issue_missing_ticket``.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from common.errors import ConflictError, DomainError, EventNotFound, ValidationError
from events.models import Event, TicketTier
from tickets import services as ticket_services
from tickets import tasks as ticket_tasks

from .models import Participant

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "eventId", "ticketName")


def normalize_email(email) -> str:
    return str(email or "").strip().lower()


def participant_exists(email, event_id) -> bool:
    email = normalize_email(email)
    if not email or not event_id:
        return False
    try:
        event_id = int(event_id)
    except (TypeError, ValueError):
        return False
    return Participant.objects.filter(email=email, event_id=event_id).exists()


def _quantity(value) -> int:
    try:
        quantity = int(value if value not in (None, "") else 1)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number")
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    return quantity


def _clean(participant_data: dict) -> dict:
    missing = [f for f in REQUIRED_FIELDS if not str(participant_data.get(f) or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", fields=missing)
    try:
        event_id = int(participant_data["eventId"])
    except (TypeError, ValueError):
        raise ValidationError("Invalid event id")
    return {
        "name": str(participant_data["name"]).strip(),
        "email": normalize_email(participant_data["email"]),
        "phone": str(participant_data.get("phone") or "").strip(),
        "event_id": event_id,
        "ticket_name": str(participant_data["ticketName"]).strip(),
        "quantity": _quantity(participant_data.get("quantity")),
        "is_volunteer": bool(participant_data.get("isVolunteer")),
        "tshirt_size": str(participant_data.get("tshirtSize") or "").strip(),
    }


def commit_registration(participant_data: dict, payment_details: dict) -> Participant:
    """
    Persist a verified registration and issue its ticket.

    Args:
        participant_data: Checkout form fields (``name``, ``email``,
            ``phone``, ``eventId``, ``ticketName``, ``quantity``,
            ``isVolunteer``, ``tshirtSize``).
        payment_details: ``payment_id``, ``order_id`` and ``signature``
            of the already verified payment.

    Raises:
        ValidationError: missing or invalid input, unknown ticket tier.
        EventNotFound: the event does not exist.
        ConflictError: a registration for the same email and event was
            committed concurrently.
    """
    data = _clean(participant_data)

    event = Event.objects.filter(pk=data["event_id"]).first()
    if event is None:
        raise EventNotFound()
    tier = TicketTier.objects.filter(event=event, name__iexact=data["ticket_name"]).first()
    if tier is None:
        raise ValidationError("Invalid ticket", ticketName=data["ticket_name"])

    try:
        amount = Decimal(tier.price) * data["quantity"]
    except InvalidOperation:
        raise ValidationError("Invalid ticket price")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")

    try:
        with transaction.atomic():
            participant = Participant.objects.create(
                name=data["name"],
                email=data["email"],
                phone=data["phone"],
                event=event,
                event_title=event.title,
                ticket_name=tier.name,
                ticket_price=tier.price,
                quantity=data["quantity"],
                amount=amount,
                is_volunteer=data["is_volunteer"],
                tshirt_size=data["tshirt_size"] if data["is_volunteer"] else "",
                payment_id=payment_details.get("payment_id", ""),
                order_id=payment_details.get("order_id", ""),
                payment_signature=payment_details.get("signature", ""),
                payment_verified=True,
                paid_at=timezone.now(),
            )
            if data["is_volunteer"]:
                Event.objects.filter(pk=event.pk).update(volunteers_applied=F("volunteers_applied") + 1)
            else:
                Event.objects.filter(pk=event.pk).update(participant_count=F("participant_count") + data["quantity"])
    except IntegrityError as exc:
        logger.warning("Concurrent registration for %s on event %s", data["email"], event.pk)
        raise ConflictError("Registration already exists for this email and event") from exc

    logger.info("Registered participant %s for event %s (payment %s)", participant.pk, event.pk,
                participant.payment_id)

    try:
        ticket_services.issue_ticket(participant)
    except DomainError as exc:
        logger.error("Ticket issuance failed for participant %s: %s", participant.pk, exc)
        participant_id = participant.pk
        transaction.on_commit(lambda: ticket_tasks.issue_missing_ticket.delay(participant_id))
    return participant
