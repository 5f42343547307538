"""
Models for the certificates app.

`CertificateTemplate` comes in two flavours: ``html`` templates hold
markup with ``{{ placeholder }}`` tokens, ``image`` templates hold JSON
with a background image and positioned text boxes.  A `Certificate` is
the rendered result for one participant and event; both its number and
the (participant, event) pair are unique.
"""
from django.conf import settings
from django.db import models


class CertificateTemplate(models.Model):
    TYPE_HTML = "html"
    TYPE_IMAGE = "image"
    TYPE_CHOICES = [(TYPE_HTML, "HTML"), (TYPE_IMAGE, "Image")]

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=8, choices=TYPE_CHOICES, default=TYPE_HTML)
    content = models.TextField(blank=True)
    background_image = models.TextField(blank=True)
    placeholders = models.JSONField(default=list, blank=True)
    organiser = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="certificate_templates",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class Certificate(models.Model):
    participant = models.ForeignKey(
        "participants.Participant", on_delete=models.CASCADE, related_name="certificates"
    )
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="certificates")
    template = models.ForeignKey(
        CertificateTemplate, on_delete=models.SET_NULL, null=True, blank=True, related_name="certificates"
    )
    certificate_number = models.CharField(max_length=40, unique=True)
    template_type = models.CharField(
        max_length=8, choices=CertificateTemplate.TYPE_CHOICES, default=CertificateTemplate.TYPE_HTML
    )
    # HTML markup, or JSON for image templates
    rendered_content = models.TextField()
    generated_at = models.DateTimeField(auto_now_add=True)
    download_url = models.CharField(max_length=500, blank=True)
    email_sent = models.BooleanField(default=False)
    email_sent_at = models.DateTimeField(null=True, blank=True)
    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_certificates",
    )

    class Meta:
        ordering = ["-generated_at"]
        constraints = [
            models.UniqueConstraint(fields=["participant", "event"], name="uniq_certificate_per_participant_event"),
        ]

    def __str__(self) -> str:
        return self.certificate_number
