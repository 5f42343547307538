"""
Views for the participants app.

Registrations are created only by the payment verification flow
(``payments.views.VerifyPaymentView``); here they can be listed by staff
and the checkout page can ask whether an email is already registered
before taking money.
"""
from __future__ import annotations

from rest_framework import permissions, viewsets, views
from rest_framework.response import Response

from common.filters import int_param
from common.pagination import DefaultPagination

from .models import Participant
from .serializers import CheckDuplicateSerializer, ParticipantSerializer
from .services import participant_exists


class ParticipantViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ParticipantSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = DefaultPagination

    def get_queryset(self):
        qs = Participant.objects.select_related("event")
        event_id = int_param(self.request, "event")
        if event_id is not None:
            qs = qs.filter(event_id=event_id)
        return qs.order_by("-created_at")


class CheckDuplicateView(views.APIView):
    """Pre-payment check: is this email already registered for the event?"""

    permission_classes = [permissions.AllowAny]
    throttle_scope = "payments"

    def post(self, request):
        serializer = CheckDuplicateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exists = participant_exists(serializer.validated_data["email"], serializer.validated_data["eventId"])
        return Response({"success": True, "exists": exists})
