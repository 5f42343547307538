"""
Views for the tickets app.

Tickets are created by the registration flow, never through the API.
Staff can list and look them up, check them in at the gate (by id,
number or scanned QR payload), cancel, transfer and download the PDF.
"""
from __future__ import annotations

from django.http import HttpResponse
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.errors import ParticipantNotFound, TicketNotFound
from common.filters import int_param
from common.pagination import DefaultPagination
from participants.models import Participant

from . import services
from .documents import render_ticket_pdf
from .models import Ticket
from .serializers import CheckInSerializer, TicketSerializer, TransferSerializer


class TicketViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = TicketSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = DefaultPagination
    throttle_scope = None

    def get_queryset(self):
        qs = Ticket.objects.select_related("event", "participant").prefetch_related("transfers")
        params = self.request.query_params
        event_id = int_param(self.request, "event")
        if event_id is not None:
            qs = qs.filter(event_id=event_id)
        participant_id = int_param(self.request, "participant")
        if participant_id is not None:
            qs = qs.filter(participant_id=participant_id)
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        return qs.order_by("-created_at")

    @action(detail=False, methods=["post"], throttle_scope="ticket_validation")
    def validate(self, request):
        """Check a ticket in at the gate."""
        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = services.check_in(
            data["ticket"],
            request.user,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        message = "Ticket already checked in" if result.duplicate else "Ticket validated successfully"
        return Response({
            "success": True,
            "message": message,
            "duplicate": result.duplicate,
            "ticket": TicketSerializer(result.ticket).data,
        })

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        ticket = services.cancel_ticket(self.get_object())
        return Response({"success": True, "ticket": TicketSerializer(ticket).data})

    @action(detail=True, methods=["post"])
    def transfer(self, request, pk=None):
        serializer = TransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = Participant.objects.filter(pk=serializer.validated_data["participantId"]).first()
        if target is None:
            raise ParticipantNotFound()
        ticket = services.transfer_ticket(self.get_object(), target)
        ticket = self.get_queryset().get(pk=ticket.pk)
        return Response({"success": True, "ticket": TicketSerializer(ticket).data})

    @action(detail=False, methods=["get"], url_path=r"number/(?P<ticket_number>[^/]+)")
    def by_number(self, request, ticket_number=None):
        ticket = self.get_queryset().filter(ticket_number=ticket_number.upper()).first()
        if ticket is None:
            raise TicketNotFound()
        return Response(TicketSerializer(ticket).data)

    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        ticket = self.get_object()
        response = HttpResponse(render_ticket_pdf(ticket), content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{ticket.ticket_number}.pdf"'
        return response
