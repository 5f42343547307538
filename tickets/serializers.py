"""Serializers for the tickets app."""
from __future__ import annotations

from rest_framework import serializers

from .models import Ticket, TicketTransfer
from .services import effective_status


class TicketTransferSerializer(serializers.ModelSerializer):
    class Meta:
        model = TicketTransfer
        fields = ["from_participant", "to_participant", "transferred_at"]
        read_only_fields = fields


class TicketSerializer(serializers.ModelSerializer):
    """Ticket with its read-time status (``expired`` once the event is over)."""

    event_id = serializers.IntegerField(source="event.id", read_only=True)
    participant_id = serializers.IntegerField(source="participant.id", read_only=True)
    participant_name = serializers.CharField(source="participant.name", read_only=True)
    status = serializers.SerializerMethodField()
    transfer_history = TicketTransferSerializer(source="transfers", many=True, read_only=True)

    class Meta:
        model = Ticket
        fields = [
            "id",
            "ticket_number",
            "qr_code",
            "event_id",
            "participant_id",
            "participant_name",
            "ticket_type",
            "price",
            "status",
            "check_in_time",
            "check_in_by",
            "check_in_latitude",
            "check_in_longitude",
            "is_transferable",
            "transfer_history",
            "pdf_url",
            "email_sent",
            "email_sent_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_status(self, obj) -> str:
        return effective_status(obj)


class CheckInSerializer(serializers.Serializer):
    ticket = serializers.CharField(max_length=2000)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)


class TransferSerializer(serializers.Serializer):
    participantId = serializers.IntegerField(min_value=1)
