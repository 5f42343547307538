"""
Ticket issuance and the ticket state machine.

    valid -> used        check-in (same actor again is a no-op)
    valid -> cancelled   explicit cancellation, terminal
    valid -> expired     derived at read time once the event is over;
                         persisted only by ``expire_stale_tickets``

Ticket numbers look like ``TKT-202501-AB12CD``.  They are allocated with
``common.numbering.allocate_unique`` so a collision on the unique index
retries with a fresh number.
"""
from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.crypto import get_random_string

from common.errors import TicketAlreadyUsed, TicketNotFound, TicketStateError, ValidationError
from common.numbering import allocate_unique
from events.models import TicketTier
from participants.models import Participant

from . import tasks
from .models import Ticket, TicketTransfer
from .qr import decode_payload, encode_payload

logger = logging.getLogger(__name__)

TICKET_SUFFIX_CHARS = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class CheckInResult:
    ticket: Ticket
    duplicate: bool = False


def generate_ticket_number(now=None) -> str:
    now = timezone.localtime(now or timezone.now())
    return f"TKT-{now:%Y%m}-{get_random_string(6, TICKET_SUFFIX_CHARS)}"


def issue_ticket(participant: Participant) -> Ticket:
    """Return the participant's ticket, creating it if it does not exist yet."""
    current = Ticket.objects.filter(participant=participant).first()
    if current is not None:
        return current

    tier = TicketTier.objects.filter(
        event_id=participant.event_id, name__iexact=participant.ticket_name
    ).first()
    issued_at = timezone.now()
    issued_ms = int(issued_at.timestamp() * 1000)
    created = []

    def create(number: str) -> Ticket:
        ticket = Ticket.objects.create(
            ticket_number=number,
            qr_code=encode_payload(number, participant.event_id, participant.pk, issued_ms),
            participant=participant,
            event_id=participant.event_id,
            ticket_type=participant.ticket_name,
            price=participant.ticket_price,
            is_transferable=bool(tier and tier.is_transferable),
        )
        created.append(ticket)
        return ticket

    ticket = allocate_unique(
        create,
        lambda: generate_ticket_number(issued_at),
        attempts=getattr(settings, "TICKET_NUMBER_ATTEMPTS", 5),
        existing=lambda: Ticket.objects.filter(participant=participant).first(),
        label="ticket number",
    )
    if created:
        logger.info("Issued ticket %s for participant %s", ticket.ticket_number, participant.pk)
        ticket_id = ticket.pk
        transaction.on_commit(lambda: tasks.send_ticket_email.delay(ticket_id))
    return ticket


def expiry_cutoff(event):
    """Moment after which unused tickets for ``event`` count as expired."""
    reference = event.end_time or event.start_time
    if reference is None:
        return None
    return reference + timedelta(hours=getattr(settings, "TICKET_EXPIRY_GRACE_HOURS", 24))


def effective_status(ticket: Ticket, now=None) -> str:
    """Stored status, except ``valid`` tickets past the cutoff read as expired."""
    if ticket.status != Ticket.STATUS_VALID:
        return ticket.status
    cutoff = expiry_cutoff(ticket.event)
    if cutoff is not None and (now or timezone.now()) > cutoff:
        return Ticket.STATUS_EXPIRED
    return ticket.status


def _lookup(reference) -> Q:
    if isinstance(reference, int):
        return Q(pk=reference)
    value = str(reference or "").strip()
    if not value:
        raise ValidationError("Ticket reference is required")
    if value.isdigit():
        return Q(pk=int(value))
    payload = decode_payload(value)
    if payload is not None:
        return Q(ticket_number=str(payload["ticket"]))
    return Q(ticket_number=value.upper())


def _locked_ticket(reference) -> Ticket:
    ticket = (
        Ticket.objects.select_for_update(of=("self",))
        .select_related("event", "participant")
        .filter(_lookup(reference))
        .first()
    )
    if ticket is None:
        raise TicketNotFound()
    return ticket


def _coordinate(value):
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.000001"))


def check_in(reference, actor, latitude=None, longitude=None) -> CheckInResult:
    """
    Mark a ticket as used.

    ``reference`` may be the ticket id, its number or the scanned QR
    payload.  A repeat scan by the actor who checked the ticket in returns
    ``duplicate=True`` instead of failing.
    """
    now = timezone.now()
    actor_id = getattr(actor, "pk", None)
    with transaction.atomic():
        ticket = _locked_ticket(reference)

        if ticket.status == Ticket.STATUS_CANCELLED:
            raise TicketStateError("Ticket has been cancelled", reason="cancelled")
        if ticket.status == Ticket.STATUS_USED:
            if actor_id is not None and ticket.check_in_by_id == actor_id:
                logger.info("Repeat check-in of %s by user %s ignored", ticket.ticket_number, actor_id)
                return CheckInResult(ticket=ticket, duplicate=True)
            logger.warning("Rejected reuse of ticket %s", ticket.ticket_number)
            raise TicketAlreadyUsed(
                checkInTime=ticket.check_in_time.isoformat() if ticket.check_in_time else None
            )
        if effective_status(ticket, now) == Ticket.STATUS_EXPIRED:
            raise TicketStateError("Ticket has expired", reason="expired")

        ticket.status = Ticket.STATUS_USED
        ticket.check_in_time = now
        ticket.check_in_by_id = actor_id
        ticket.check_in_latitude = _coordinate(latitude)
        ticket.check_in_longitude = _coordinate(longitude)
        ticket.save(update_fields=[
            "status", "check_in_time", "check_in_by", "check_in_latitude", "check_in_longitude", "updated_at",
        ])
        Participant.objects.filter(pk=ticket.participant_id).update(checked_in=True, check_in_time=now)

    logger.info("Ticket %s checked in by user %s", ticket.ticket_number, actor_id)
    return CheckInResult(ticket=ticket)


def cancel_ticket(ticket: Ticket) -> Ticket:
    with transaction.atomic():
        ticket = _locked_ticket(ticket.pk)
        if ticket.status != Ticket.STATUS_VALID:
            raise TicketStateError(f"Cannot cancel a {ticket.status} ticket", reason=ticket.status)
        ticket.status = Ticket.STATUS_CANCELLED
        ticket.save(update_fields=["status", "updated_at"])
    logger.info("Ticket %s cancelled", ticket.ticket_number)
    return ticket


def expire_stale_tickets(now=None) -> int:
    """Persist ``expired`` on valid tickets whose event is over.  Returns the count."""
    now = now or timezone.now()
    threshold = now - timedelta(hours=getattr(settings, "TICKET_EXPIRY_GRACE_HOURS", 24))
    stale = Ticket.objects.filter(status=Ticket.STATUS_VALID).filter(
        Q(event__end_time__lt=threshold)
        | Q(event__end_time__isnull=True, event__start_time__lt=threshold)
    )
    count = stale.update(status=Ticket.STATUS_EXPIRED, updated_at=now)
    if count:
        logger.info("Expired %s stale tickets", count)
    return count


def transfer_ticket(ticket: Ticket, to_participant: Participant) -> Ticket:
    """Hand a transferable, still-valid ticket to another participant of the same event."""
    with transaction.atomic():
        ticket = _locked_ticket(ticket.pk)
        if not ticket.is_transferable:
            raise TicketStateError("Ticket is not transferable", reason="not transferable")
        status = effective_status(ticket)
        if status != Ticket.STATUS_VALID:
            raise TicketStateError(f"Cannot transfer a {status} ticket", reason=status)
        if to_participant.event_id != ticket.event_id:
            raise ValidationError("Participant is registered for a different event")
        if to_participant.pk == ticket.participant_id:
            raise ValidationError("Ticket already belongs to this participant")
        if Ticket.objects.filter(participant=to_participant).exists():
            raise ValidationError("Participant already holds a ticket")

        TicketTransfer.objects.create(
            ticket=ticket,
            from_participant_id=ticket.participant_id,
            to_participant=to_participant,
        )
        ticket.participant = to_participant
        ticket.email_sent = False
        ticket.email_sent_at = None
        ticket.save(update_fields=["participant", "email_sent", "email_sent_at", "updated_at"])
        ticket_id = ticket.pk
        transaction.on_commit(lambda: tasks.send_ticket_email.delay(ticket_id))

    logger.info("Ticket %s transferred to participant %s", ticket.ticket_number, to_participant.pk)
    return ticket
