"""Serializers for the certificates app."""
from __future__ import annotations

from rest_framework import serializers

from .models import Certificate


class CertificateSerializer(serializers.ModelSerializer):
    participant_name = serializers.CharField(source="participant.name", read_only=True)
    event_title = serializers.CharField(source="event.title", read_only=True)

    class Meta:
        model = Certificate
        fields = [
            "id",
            "certificate_number",
            "participant",
            "participant_name",
            "event",
            "event_title",
            "template",
            "template_type",
            "generated_at",
            "download_url",
            "email_sent",
            "email_sent_at",
        ]
        read_only_fields = fields


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """Public view of a certificate, used by the verification page."""

    participant_name = serializers.CharField(source="participant.name", read_only=True)
    event_title = serializers.CharField(source="event.title", read_only=True)

    class Meta:
        model = Certificate
        fields = ["certificate_number", "participant_name", "event_title", "generated_at"]
        read_only_fields = fields


class GenerateCertificateSerializer(serializers.Serializer):
    participantId = serializers.IntegerField(min_value=1)
    eventId = serializers.IntegerField(min_value=1)
    templateId = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class SendCertificateEmailSerializer(serializers.Serializer):
    email = serializers.EmailField()
