"""
Outbound transactional email.

Thin wrapper over Django's ``EmailMessage`` so callers get one contract
(``to, subject, content, attachments``) and one failure type
(``DownstreamDeliveryError``).  Transport details live in the
``EMAIL_*`` settings.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from typing import Iterable

from django.conf import settings
from django.core.mail import EmailMessage

from .errors import DownstreamDeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mimetype: str = "application/octet-stream"


def send_transactional_email(
    to: str,
    subject: str,
    content: str,
    attachments: Iterable[Attachment] = (),
) -> None:
    """Send a plain-text email, raising ``DownstreamDeliveryError`` on failure."""
    if not to:
        raise DownstreamDeliveryError("Recipient address is required")

    message = EmailMessage(
        subject=subject,
        body=content,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to],
    )
    for attachment in attachments:
        message.attach(attachment.filename, attachment.content, attachment.mimetype)

    try:
        message.send(fail_silently=False)
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email to %s failed (%s): %s", to, subject, exc)
        raise DownstreamDeliveryError("Email delivery failed") from exc
    logger.info("Email sent to %s: %s", to, subject)
