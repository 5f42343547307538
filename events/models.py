"""
Models for the events app.

An `Event` is what participants pay to attend.  Its ticket tiers
(`TicketTier`) carry the price used when a paid registration is
committed; tier names are stored upper-case so lookups are
case-insensitive.  Running counters (`participant_count`,
`volunteers_applied`) are bumped with F() expressions by the
participants app.
"""

from django.conf import settings
from django.db import models
from django.utils.text import slugify


class Event(models.Model):
    """Represents an event participants can register and pay for."""
    title = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    organizer_name = models.CharField(max_length=255, blank=True)
    volunteer_count = models.PositiveIntegerField(default=0)
    volunteers_applied = models.PositiveIntegerField(default=0)
    participant_count = models.PositiveIntegerField(default=0)
    is_tshirt_available = models.BooleanField(default=True)
    # Meta
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.title)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.title


class TicketTier(models.Model):
    """A priced ticket option for an event (e.g. GENERAL, VIP)."""
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ticket_tiers")
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    is_transferable = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="uniq_ticket_tier_per_event"),
        ]
        ordering = ["price"]

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"
