from django.contrib import admin

from .models import Certificate, CertificateTemplate


@admin.register(CertificateTemplate)
class CertificateTemplateAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "organiser", "created_at")
    list_filter = ("type",)
    search_fields = ("name",)


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("certificate_number", "participant", "event", "template_type", "email_sent", "generated_at")
    list_filter = ("template_type", "email_sent")
    search_fields = ("certificate_number", "participant__email", "participant__name")
    readonly_fields = ("certificate_number", "rendered_content", "generated_at")
