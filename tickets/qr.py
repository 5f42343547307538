"""QR payloads for tickets.

The payload printed on a ticket is base64-encoded JSON
``{ticket, event, participant, timestamp}``; scanners send it back to the
validate endpoint, which accepts it in place of a ticket number.
"""
from __future__ import annotations

import base64
import binascii
import json
from io import BytesIO

import qrcode
import qrcode.constants
from qrcode.main import QRCode


def encode_payload(ticket_number: str, event_id: int, participant_id: int, timestamp_ms: int) -> str:
    data = {
        "ticket": ticket_number,
        "event": event_id,
        "participant": participant_id,
        "timestamp": timestamp_ms,
    }
    return base64.b64encode(json.dumps(data, separators=(",", ":")).encode("utf-8")).decode("ascii")


def decode_payload(value: str) -> dict | None:
    """Return the decoded payload, or None if ``value`` is not one."""
    try:
        raw = base64.b64decode(value, validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError):
        return None
    if not isinstance(data, dict) or "ticket" not in data:
        return None
    return data


def render_png(payload: str, box_size: int = 8, border: int = 2) -> bytes:
    """Render ``payload`` as a PNG QR code."""
    qr = QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffered = BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()
