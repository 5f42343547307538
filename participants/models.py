"""
Models for the participants app.

A `Participant` is one paid (or volunteer) registration for an event.
Payment metadata from the verified callback is copied onto the row.  The
(email, event) pair is unique at the database level; that constraint is
what actually prevents double registration.
"""
from django.db import models


class Participant(models.Model):
    name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32, blank=True)
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="participants")
    # Snapshot of the event/tier at registration time
    event_title = models.CharField(max_length=255, blank=True)
    ticket_name = models.CharField(max_length=100)
    ticket_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    quantity = models.PositiveIntegerField(default=1)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_volunteer = models.BooleanField(default=False)
    tshirt_size = models.CharField(max_length=8, blank=True)

    certificate_generated = models.BooleanField(default=False)
    certificate = models.OneToOneField(
        "certificates.Certificate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    email_sent = models.BooleanField(default=False)
    email_sent_at = models.DateTimeField(null=True, blank=True)

    checked_in = models.BooleanField(default=False)
    check_in_time = models.DateTimeField(null=True, blank=True)

    # Payment
    payment_id = models.CharField(max_length=100, blank=True, db_index=True)
    order_id = models.CharField(max_length=100, blank=True)
    payment_signature = models.CharField(max_length=255, blank=True)
    payment_verified = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["email", "event"], name="uniq_participant_email_per_event"),
        ]

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
