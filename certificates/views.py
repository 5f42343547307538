"""
Views for the certificates app.

Organisers generate certificates for participants, download them as PDF
or JPG and email them.  Anyone holding a certificate number can verify
it without logging in.
"""
from __future__ import annotations

from django.http import HttpResponse
from django.urls import reverse
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.errors import ValidationError
from common.filters import int_param
from common.pagination import DefaultPagination

from .artifacts import render_jpg, render_pdf
from .models import Certificate
from .serializers import (
    CertificateSerializer,
    CertificateVerificationSerializer,
    GenerateCertificateSerializer,
    SendCertificateEmailSerializer,
)
from .services import find_certificate_by_number, render_certificate, send_certificate_email

DOWNLOAD_FORMATS = {
    "pdf": (render_pdf, "application/pdf"),
    "jpg": (render_jpg, "image/jpeg"),
}


class CertificateViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CertificateSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = DefaultPagination
    throttle_scope = None

    def get_queryset(self):
        qs = Certificate.objects.select_related("participant", "event", "template")
        event_id = int_param(self.request, "event")
        if event_id is not None:
            qs = qs.filter(event_id=event_id)
        return qs.order_by("-generated_at")

    @action(detail=False, methods=["post"], throttle_scope="certificates")
    def generate(self, request):
        serializer = GenerateCertificateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        certificate = render_certificate(
            data["participantId"],
            data["eventId"],
            template_id=data.get("templateId"),
            issued_by=request.user,
        )
        download_url = certificate.download_url or request.build_absolute_uri(
            reverse("certificate-download", args=[certificate.pk])
        )
        return Response({
            "success": True,
            "certificateId": certificate.pk,
            "certificateNumber": certificate.certificate_number,
            "downloadUrl": download_url,
        })

    @action(
        detail=False,
        methods=["get"],
        url_path=r"verify/(?P<certificate_number>[^/]+)",
        permission_classes=[permissions.AllowAny],
    )
    def verify(self, request, certificate_number=None):
        certificate = find_certificate_by_number(certificate_number)
        return Response({"success": True, "certificate": CertificateVerificationSerializer(certificate).data})

    @action(detail=True, methods=["get"])
    def download(self, request, pk=None):
        fmt = (request.query_params.get("format") or "pdf").lower()
        if fmt == "jpeg":
            fmt = "jpg"
        if fmt not in DOWNLOAD_FORMATS:
            raise ValidationError("Format must be pdf or jpg")
        certificate = self.get_object()
        render, content_type = DOWNLOAD_FORMATS[fmt]
        response = HttpResponse(render(certificate), content_type=content_type)
        response["Content-Disposition"] = (
            f'attachment; filename="certificate-{certificate.certificate_number}.{fmt}"'
        )
        return response

    @action(detail=True, methods=["post"], url_path="send-email")
    def send_email(self, request, pk=None):
        serializer = SendCertificateEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        certificate = self.get_object()
        sent = send_certificate_email(certificate.pk, serializer.validated_data["email"])
        return Response({"success": sent})
