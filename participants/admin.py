from django.contrib import admin

from .models import Participant


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "event", "ticket_name", "quantity", "amount", "payment_verified",
                    "checked_in", "created_at")
    list_filter = ("payment_verified", "is_volunteer", "checked_in", "certificate_generated")
    search_fields = ("name", "email", "payment_id", "order_id")
    readonly_fields = ("payment_id", "order_id", "payment_signature", "paid_at", "created_at")
