"""
Views for the payments app.

Checkout flow: the page calls ``create-order`` to get a Razorpay order
and the public key, opens Razorpay checkout, then posts the callback
fields to ``verify-payment``, which verifies the signature and commits
the registration.  Errors are raised as ``common.errors`` exceptions and
rendered by ``common.exceptions.domain_exception_handler``.
"""
from __future__ import annotations

import time

from rest_framework import permissions, views
from rest_framework.response import Response

from participants.serializers import ParticipantSerializer
from tickets.serializers import TicketSerializer

from .client import RazorpayClient
from .serializers import CreateOrderSerializer, VerifyPaymentSerializer
from .services import PaymentAssertion, complete_paid_registration


class CreateOrderView(views.APIView):
    permission_classes = [permissions.AllowAny]
    throttle_scope = "payments"

    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        participant = data["participantData"]

        client = RazorpayClient.from_settings()
        notes = {
            "eventId": data["eventId"],
            "participantName": participant.get("name"),
            "participantEmail": participant.get("email"),
            "ticketName": participant.get("ticketName"),
            "quantity": participant.get("quantity"),
        }
        order = client.create_order(
            data["amount"],
            currency=data["currency"],
            receipt=f"evt_{str(int(time.time() * 1000))[-8:]}",
            notes={k: v for k, v in notes.items() if v not in (None, "")},
        )
        return Response({"success": True, "order": order, "key": client.key_id})


class VerifyPaymentView(views.APIView):
    """Verify a Razorpay checkout callback and register the participant."""

    permission_classes = [permissions.AllowAny]
    throttle_scope = "payments"

    def post(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        assertion = PaymentAssertion(
            order_id=data["razorpay_order_id"],
            payment_id=data["razorpay_payment_id"],
            signature=data["razorpay_signature"],
            amount=data.get("amount"),
            currency=data["currency"],
        )
        participant_data = dict(data["participantData"])
        event_id = data.get("eventId") or participant_data.get("eventId")
        if event_id:
            participant_data["eventId"] = event_id

        outcome = complete_paid_registration(RazorpayClient.from_settings(), assertion, participant_data, event_id)

        ticket = TicketSerializer(outcome.ticket).data if outcome.ticket else None
        return Response({
            "success": True,
            "message": "Payment verified and registration completed successfully",
            "participant": ParticipantSerializer(outcome.participant).data,
            "ticket": ticket,
            "ticketPending": ticket is None,
            "payment": {
                "paymentId": assertion.payment_id,
                "orderId": assertion.order_id,
                "verified": True,
            },
        })


class PaymentStatusView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, payment_id: str):
        payment = RazorpayClient.from_settings().fetch_payment(payment_id)
        return Response({
            "success": True,
            "payment": {
                "id": payment.get("id"),
                "status": payment.get("status"),
                "amount": payment.get("amount"),
                "currency": payment.get("currency"),
                "method": payment.get("method"),
                "createdAt": payment.get("created_at"),
            },
        })


class KeyView(views.APIView):
    """Public key id for Razorpay checkout."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"success": True, "key": RazorpayClient.from_settings().key_id})
