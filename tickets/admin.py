from django.contrib import admin

from .models import Ticket, TicketTransfer


class TicketTransferInline(admin.TabularInline):
    model = TicketTransfer
    extra = 0
    readonly_fields = ("from_participant", "to_participant", "transferred_at")
    can_delete = False


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("ticket_number", "participant", "event", "ticket_type", "status", "check_in_time", "email_sent")
    list_filter = ("status", "email_sent", "is_transferable")
    search_fields = ("ticket_number", "participant__email", "participant__name")
    readonly_fields = ("ticket_number", "qr_code", "created_at", "updated_at")
    inlines = [TicketTransferInline]
