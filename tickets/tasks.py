"""
Celery tasks for the tickets app.

Everything that talks to the outside world (email) or repairs the
pipeline after a partial failure runs here, outside the request that
committed the registration.  Beat runs the periodic ones; see
``CELERY_BEAT_SCHEDULE`` in settings.
"""
from __future__ import annotations

import logging

from celery import shared_task
from django.utils import timezone

from common.errors import DomainError, DownstreamDeliveryError
from common.mail import Attachment, send_transactional_email
from participants.models import Participant

from . import services
from .documents import render_ticket_pdf
from .models import Ticket

logger = logging.getLogger(__name__)


def _ticket_email_body(ticket: Ticket) -> str:
    participant = ticket.participant
    event = ticket.event
    lines = [
        f"Hi {participant.name},",
        "",
        f"Your registration for {event.title} is confirmed.",
        f"Ticket number: {ticket.ticket_number}",
        f"Ticket type: {ticket.ticket_type} x{participant.quantity}",
    ]
    if event.location:
        lines.append(f"Venue: {event.location}")
    lines += ["", "Your ticket is attached. Please bring it (printed or on your phone) to the venue."]
    return "\n".join(lines)


@shared_task(
    autoretry_for=(DownstreamDeliveryError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 5},
)
def send_ticket_email(ticket_id: int) -> bool:
    """Email the ticket PDF to its holder.  Already-sent tickets are skipped."""
    ticket = Ticket.objects.select_related("participant", "event").filter(pk=ticket_id).first()
    if ticket is None:
        logger.warning("Ticket %s vanished before its email was sent", ticket_id)
        return False
    if ticket.email_sent:
        return True

    pdf = render_ticket_pdf(ticket)
    send_transactional_email(
        to=ticket.participant.email,
        subject=f"Your ticket for {ticket.event.title}",
        content=_ticket_email_body(ticket),
        attachments=[Attachment(f"{ticket.ticket_number}.pdf", pdf, "application/pdf")],
    )
    now = timezone.now()
    Ticket.objects.filter(pk=ticket.pk).update(email_sent=True, email_sent_at=now)
    Participant.objects.filter(pk=ticket.participant_id).update(email_sent=True, email_sent_at=now)
    return True


@shared_task(bind=True, max_retries=5, default_retry_delay=60)
def issue_missing_ticket(self, participant_id: int) -> int | None:
    """Retry issuance for a participant whose ticket failed during registration."""
    participant = Participant.objects.filter(pk=participant_id).first()
    if participant is None:
        return None
    try:
        ticket = services.issue_ticket(participant)
    except DomainError as exc:
        logger.error("Ticket issuance retry failed for participant %s: %s", participant_id, exc)
        raise self.retry(exc=exc)
    return ticket.pk


@shared_task
def expire_stale_tickets() -> int:
    return services.expire_stale_tickets()


@shared_task
def resend_pending_ticket_emails(limit: int = 200) -> int:
    """Queue emails for tickets whose delivery never succeeded."""
    pending = list(
        Ticket.objects.filter(email_sent=False, status=Ticket.STATUS_VALID)
        .order_by("created_at")
        .values_list("pk", flat=True)[:limit]
    )
    for ticket_id in pending:
        send_ticket_email.delay(ticket_id)
    return len(pending)


@shared_task
def reissue_missing_tickets(limit: int = 200) -> int:
    """Queue issuance for verified participants that still have no ticket."""
    missing = list(
        Participant.objects.filter(payment_verified=True, ticket__isnull=True)
        .order_by("created_at")
        .values_list("pk", flat=True)[:limit]
    )
    for participant_id in missing:
        issue_missing_ticket.delay(participant_id)
    if missing:
        logger.warning("Re-queued ticket issuance for %s participants", len(missing))
    return len(missing)
