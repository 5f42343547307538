"""Serializers for the participants app."""
from __future__ import annotations

from rest_framework import serializers

from .models import Participant


class ParticipantSerializer(serializers.ModelSerializer):
    """Read-only view of a registration; the payment signature is never exposed."""

    event_id = serializers.IntegerField(source="event.id", read_only=True)
    certificate_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Participant
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "event_id",
            "event_title",
            "ticket_name",
            "ticket_price",
            "quantity",
            "amount",
            "is_volunteer",
            "tshirt_size",
            "certificate_generated",
            "certificate_id",
            "email_sent",
            "email_sent_at",
            "checked_in",
            "check_in_time",
            "payment_id",
            "order_id",
            "payment_verified",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields


class CheckDuplicateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    eventId = serializers.IntegerField(min_value=1)
