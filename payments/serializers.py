"""
Serializers for the payments app.

Field names follow what the checkout page posts (Razorpay's
``razorpay_*`` keys plus camelCase registration data).  Only the shape of
the request is checked here.  ``participantData`` is validated by the
registration service, after the payment has been verified, so that a bad
form after a captured payment is recorded as an incident instead of
being bounced as a plain 400.
"""
from __future__ import annotations

from rest_framework import serializers


class CreateOrderSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1)
    currency = serializers.CharField(max_length=3, required=False, default="INR")
    eventId = serializers.IntegerField()
    participantData = serializers.DictField()


class VerifyPaymentSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField(max_length=100)
    razorpay_payment_id = serializers.CharField(max_length=100)
    razorpay_signature = serializers.CharField(max_length=255)
    participantData = serializers.DictField()
    eventId = serializers.IntegerField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    currency = serializers.CharField(max_length=3, required=False, default="INR")
