"""Celery tasks for the certificates app."""
from __future__ import annotations

import logging

from celery import shared_task
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from common.errors import ArtifactRenderError

from .artifacts import render_pdf
from .models import Certificate

logger = logging.getLogger(__name__)


@shared_task(
    autoretry_for=(ArtifactRenderError, OSError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def store_certificate_artifact(certificate_id: int) -> str | None:
    """Render the certificate PDF, save it through the storage backend and record its URL."""
    certificate = Certificate.objects.select_related("template").filter(pk=certificate_id).first()
    if certificate is None:
        return None
    if certificate.download_url:
        return certificate.download_url

    name = default_storage.save(
        f"certificates/{certificate.certificate_number}.pdf",
        ContentFile(render_pdf(certificate)),
    )
    url = default_storage.url(name)
    Certificate.objects.filter(pk=certificate.pk).update(download_url=url)
    logger.info("Stored certificate %s at %s", certificate.certificate_number, name)
    return url
