"""Query-string helpers for list endpoints."""
from __future__ import annotations

from .errors import ValidationError


def int_param(request, name: str):
    """Return ``?name=`` as an int, ``None`` when absent."""
    value = request.query_params.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name} id", **{name: value})
