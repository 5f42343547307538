"""Admin configuration for payment incidents (refund / reconciliation queue)."""
from django.contrib import admin

from .models import PaymentIncident


@admin.register(PaymentIncident)
class PaymentIncidentAdmin(admin.ModelAdmin):
    list_display = ("payment_id", "reason", "email", "event", "resolved", "created_at")
    list_filter = ("reason", "resolved")
    search_fields = ("payment_id", "order_id", "email")
    readonly_fields = ("payment_id", "order_id", "event", "email", "reason", "detail", "payload", "created_at")
    actions = ["mark_resolved"]

    @admin.action(description="Mark selected incidents as resolved")
    def mark_resolved(self, request, queryset):
        queryset.update(resolved=True)
