"""
Models for the tickets app.

Each participant gets at most one `Ticket`.  Ticket numbers are random
(``TKT-YYYYMM-XXXXXX``) and unique at the database level; they are never
reused, even after cancellation.  Transfers between participants are kept
as append-only `TicketTransfer` rows.
"""
from django.conf import settings
from django.db import models


class Ticket(models.Model):
    STATUS_VALID = "valid"
    STATUS_USED = "used"
    STATUS_CANCELLED = "cancelled"
    STATUS_EXPIRED = "expired"
    STATUS_CHOICES = [
        (STATUS_VALID, "Valid"),
        (STATUS_USED, "Used"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_EXPIRED, "Expired"),
    ]

    ticket_number = models.CharField(max_length=32, unique=True)
    qr_code = models.TextField(blank=True)
    participant = models.OneToOneField(
        "participants.Participant", on_delete=models.PROTECT, related_name="ticket"
    )
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="tickets")
    ticket_type = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_VALID, db_index=True)

    check_in_time = models.DateTimeField(null=True, blank=True)
    check_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_tickets",
    )
    check_in_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    check_in_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    is_transferable = models.BooleanField(default=False)
    pdf_url = models.CharField(max_length=500, blank=True)
    email_sent = models.BooleanField(default=False)
    email_sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.ticket_number


class TicketTransfer(models.Model):
    ticket = models.ForeignKey(Ticket, on_delete=models.CASCADE, related_name="transfers")
    from_participant = models.ForeignKey(
        "participants.Participant", on_delete=models.PROTECT, related_name="tickets_transferred_out"
    )
    to_participant = models.ForeignKey(
        "participants.Participant", on_delete=models.PROTECT, related_name="tickets_transferred_in"
    )
    transferred_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["transferred_at"]
