"""
Placeholder resolution for certificate templates.

Tokens look like ``{{ participant_name }}`` (whitespace inside the braces
is optional).  Substitution is lenient: a token with no matching field is
left in the output exactly as written.
"""
from __future__ import annotations

import copy
import re

from django.utils import formats, timezone

TOKEN_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _short_date(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "tzinfo") and timezone.is_aware(value):
        value = timezone.localtime(value)
    return formats.date_format(value, "SHORT_DATE_FORMAT")


def resolve_fields(participant, event, certificate_number: str, completed_at=None) -> dict:
    """Values available to templates for one participant/event."""
    organizer = event.organizer_name
    if not organizer and event.created_by_id:
        organizer = event.created_by.get_full_name() or event.created_by.get_username()
    return {
        "participant_name": participant.name,
        "participant_email": participant.email,
        "event_name": event.title,
        "event_date": _short_date(event.start_time),
        "event_location": event.location,
        "event_description": event.description,
        "certificate_id": certificate_number,
        "certificate_number": certificate_number,
        "organizer_name": organizer or "",
        "completion_date": _short_date(completed_at or timezone.now()),
        "ticket_name": participant.ticket_name,
    }


def substitute(text: str, fields: dict) -> str:
    def replace(match):
        name = match.group(1)
        if name in fields and fields[name] is not None:
            return str(fields[name])
        return match.group(0)

    return TOKEN_RE.sub(replace, text or "")


def fill_boxes(layout, fields: dict):
    """
    Fill the ``text`` of every placeholder box in an image-template layout.

    ``layout`` is either ``{"backgroundImage": ..., "placeholders": [...]}``
    or a bare list of boxes.  A box whose ``name`` is a known field gets
    that value; otherwise its own text (or name) goes through
    ``substitute``.  Position, size and styling are left untouched.
    """
    layout = copy.deepcopy(layout)
    boxes = layout.get("placeholders", []) if isinstance(layout, dict) else layout
    for box in boxes or []:
        if not isinstance(box, dict):
            continue
        name = box.get("name")
        if name in fields and fields[name] is not None:
            box["text"] = str(fields[name])
        else:
            box["text"] = substitute(box.get("text") or name or "", fields)
    return layout
