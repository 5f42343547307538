"""
Models for the payments app.

Payment details themselves live on the participant row.  This app only
persists ``PaymentIncident`` records: a payment was captured but the
registration pipeline could not complete cleanly (duplicate, failure
after capture, provider mismatch), so an operator has to refund or
reconcile by hand.
"""
from django.db import models


class PaymentIncident(models.Model):
    REASON_DUPLICATE = "duplicate_registration"
    REASON_REGISTRATION_FAILED = "registration_failed"
    REASON_NOT_CAPTURED = "not_captured"
    REASON_AMOUNT_MISMATCH = "amount_mismatch"
    REASON_CHOICES = [
        (REASON_DUPLICATE, "Duplicate registration"),
        (REASON_REGISTRATION_FAILED, "Registration failed after payment"),
        (REASON_NOT_CAPTURED, "Payment not captured"),
        (REASON_AMOUNT_MISMATCH, "Amount mismatch"),
    ]

    payment_id = models.CharField(max_length=100, db_index=True)
    order_id = models.CharField(max_length=100, blank=True)
    event = models.ForeignKey(
        "events.Event", on_delete=models.SET_NULL, null=True, blank=True, related_name="payment_incidents"
    )
    email = models.EmailField(blank=True)
    reason = models.CharField(max_length=32, choices=REASON_CHOICES)
    detail = models.TextField(blank=True)
    payload = models.JSONField(default=dict, blank=True)
    resolved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.payment_id} - {self.reason}"
