"""
Admin configuration for the events app.

Events are managed here (generic CRUD is not exposed over the API);
ticket tiers are edited inline.
"""
from django.contrib import admin

from .models import Event, TicketTier


class TicketTierInline(admin.TabularInline):
    model = TicketTier
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "start_time", "location", "participant_count", "volunteers_applied", "created_at")
    search_fields = ("title", "location", "organizer_name")
    prepopulated_fields = {"slug": ("title",)}
    inlines = [TicketTierInline]
