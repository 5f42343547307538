"""
Certificate rendering and distribution.

``render_certificate`` is idempotent per participant: the participant
row is locked, and if a certificate already exists it is returned
unchanged.  A new certificate and the participant's
``certificate_generated`` flag are written in one transaction, so the
flag always points at a real row.  The PDF is stored afterwards by a
Celery task.
"""
from __future__ import annotations

import json
import logging
import string
import time

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from common.errors import (
    CertificateNotFound,
    DownstreamDeliveryError,
    ParticipantNotFound,
    TemplateNotFound,
    ValidationError,
)
from common.mail import Attachment, send_transactional_email
from common.numbering import allocate_unique
from participants.models import Participant

from . import tasks
from .artifacts import render_pdf
from .models import Certificate, CertificateTemplate
from .placeholders import fill_boxes, resolve_fields, substitute

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
  <head><title>Certificate {{ certificate_number }}</title></head>
  <body>
    <div class="certificate">
      <h1>Certificate of Participation</h1>
      <p>This is to certify that</p>
      <h2>{{ participant_name }}</h2>
      <p>participated in {{ event_name }}</p>
      <p>held on {{ event_date }}</p>
      <p>Organised by {{ organizer_name }}</p>
      <p>Certificate No. {{ certificate_number }}</p>
      <p>Issued on {{ completion_date }}</p>
    </div>
  </body>
</html>
"""


def generate_certificate_number() -> str:
    suffix = get_random_string(4, string.ascii_uppercase + string.digits)
    return f"CERT-{int(time.time() * 1000)}-{suffix}"


def _template(template_id):
    if not template_id:
        return None
    template = CertificateTemplate.objects.filter(pk=template_id).first()
    if template is None:
        raise TemplateNotFound()
    return template


def _render_content(template, fields: dict) -> tuple[str, str]:
    if template is None:
        return CertificateTemplate.TYPE_HTML, substitute(DEFAULT_TEMPLATE, fields)
    if template.type == CertificateTemplate.TYPE_IMAGE:
        try:
            layout = json.loads(template.content) if template.content else {}
        except ValueError:
            raise ValidationError("Certificate template content is not valid JSON")
        if isinstance(layout, list):
            layout = {"placeholders": layout}
        if not isinstance(layout, dict):
            raise ValidationError("Certificate template content is not valid JSON")
        layout.setdefault("backgroundImage", template.background_image)
        layout.setdefault("placeholders", template.placeholders or [])
        return CertificateTemplate.TYPE_IMAGE, json.dumps(fill_boxes(layout, fields))
    return CertificateTemplate.TYPE_HTML, substitute(template.content, fields)


def render_certificate(participant_id, event_id, template_id=None, issued_by=None) -> Certificate:
    """Return the participant's certificate for the event, rendering it on first call."""
    with transaction.atomic():
        participant = (
            Participant.objects.select_for_update(of=("self",))
            .select_related("event", "event__created_by")
            .filter(pk=participant_id)
            .first()
        )
        if participant is None:
            raise ParticipantNotFound()
        if str(participant.event_id) != str(event_id):
            raise ValidationError("Participant is not registered for this event")

        if participant.certificate_generated and participant.certificate_id:
            return Certificate.objects.get(pk=participant.certificate_id)

        orphan = Certificate.objects.filter(participant=participant, event_id=participant.event_id).first()
        if orphan is not None:
            _link(participant, orphan)
            return orphan

        template = _template(template_id)
        event = participant.event
        completed_at = timezone.now()

        def create(number: str) -> Certificate:
            fields = resolve_fields(participant, event, number, completed_at)
            template_type, content = _render_content(template, fields)
            return Certificate.objects.create(
                participant=participant,
                event=event,
                template=template,
                certificate_number=number,
                template_type=template_type,
                rendered_content=content,
                issued_by=issued_by if getattr(issued_by, "pk", None) else None,
            )

        certificate = allocate_unique(
            create,
            generate_certificate_number,
            attempts=getattr(settings, "CERTIFICATE_NUMBER_ATTEMPTS", 5),
            existing=lambda: Certificate.objects.filter(participant=participant, event=event).first(),
            label="certificate number",
        )
        _link(participant, certificate)
        certificate_id = certificate.pk
        transaction.on_commit(lambda: tasks.store_certificate_artifact.delay(certificate_id))

    logger.info("Certificate %s generated for participant %s", certificate.certificate_number, participant.pk)
    return certificate


def _link(participant: Participant, certificate: Certificate) -> None:
    participant.certificate_generated = True
    participant.certificate = certificate
    participant.save(update_fields=["certificate_generated", "certificate"])


def find_certificate_by_number(number: str) -> Certificate:
    certificate = (
        Certificate.objects.select_related("participant", "event")
        .filter(certificate_number=(number or "").strip())
        .first()
    )
    if certificate is None:
        raise CertificateNotFound()
    return certificate


def send_certificate_email(certificate_id, email: str) -> bool:
    """Email the certificate PDF.  Returns False when delivery fails."""
    if not email:
        raise ValidationError("Email is required")
    certificate = (
        Certificate.objects.select_related("participant", "event", "template").filter(pk=certificate_id).first()
    )
    if certificate is None:
        raise CertificateNotFound()

    participant = certificate.participant
    body = (
        f"Dear {participant.name},\n\n"
        f"Please find attached your certificate for {certificate.event.title}.\n"
        f"Certificate number: {certificate.certificate_number}\n"
    )
    try:
        pdf = render_pdf(certificate)
        send_transactional_email(
            to=email,
            subject=f"Your certificate for {certificate.event.title}",
            content=body,
            attachments=[Attachment(f"certificate-{certificate.certificate_number}.pdf", pdf, "application/pdf")],
        )
    except DownstreamDeliveryError as exc:
        logger.warning("Certificate %s email to %s failed: %s", certificate.certificate_number, email, exc)
        return False

    now = timezone.now()
    Certificate.objects.filter(pk=certificate.pk).update(email_sent=True, email_sent_at=now)
    Participant.objects.filter(pk=participant.pk).update(email_sent=True, email_sent_at=now)
    return True
