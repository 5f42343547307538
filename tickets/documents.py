"""Printable ticket PDF (reportlab) with the QR payload embedded."""
from __future__ import annotations

from io import BytesIO

from django.utils import formats, timezone
from reportlab.lib.pagesizes import A6, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .qr import render_png


def render_ticket_pdf(ticket) -> bytes:
    participant = ticket.participant
    event = ticket.event
    w, h = landscape(A6)

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(w, h))
    c.setTitle(ticket.ticket_number)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(8 * mm, h - 14 * mm, event.title[:40])

    c.setFont("Helvetica", 10)
    y = h - 24 * mm
    lines = [
        f"Ticket: {ticket.ticket_number}",
        f"Name: {participant.name}",
        f"Type: {ticket.ticket_type}  x{participant.quantity}",
    ]
    if event.start_time:
        start = timezone.localtime(event.start_time)
        lines.append(f"Date: {formats.date_format(start, 'DATETIME_FORMAT')}")
    if event.location:
        lines.append(f"Venue: {event.location[:45]}")
    for line in lines:
        c.drawString(8 * mm, y, line)
        y -= 6 * mm

    qr_size = 40 * mm
    if ticket.qr_code:
        qr_image = ImageReader(BytesIO(render_png(ticket.qr_code)))
        c.drawImage(qr_image, w - qr_size - 6 * mm, 8 * mm, width=qr_size, height=qr_size)

    c.setFont("Helvetica-Oblique", 7)
    c.setFillGray(0.4)
    c.drawString(8 * mm, 6 * mm, "Present this ticket at the venue entrance.")

    c.showPage()
    c.save()
    return buffer.getvalue()
