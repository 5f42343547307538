"""
Allocation of generated, store-unique identifiers.

Ticket and certificate numbers are random; the database unique index is
the real guard.  ``allocate_unique`` inserts inside a savepoint and, on an
``IntegrityError``, either returns a row created concurrently for the same
owner (``existing``) or tries again with a fresh number.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from django.db import IntegrityError, transaction

from .errors import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def allocate_unique(
    create: Callable[[str], T],
    generate: Callable[[], str],
    *,
    attempts: int = 5,
    existing: Optional[Callable[[], Optional[T]]] = None,
    label: str = "number",
) -> T:
    """Call ``create(number)`` until it succeeds without a uniqueness violation.

    Args:
        create: Inserts the row for a candidate number and returns it.
        generate: Produces a new candidate number.
        attempts: Upper bound on insert attempts before giving up.
        existing: Optional lookup run after a violation; a non-None result
            means another writer already created the row and it is returned.
        label: Used in log lines and the final error message.

    Raises:
        ConflictError: if every attempt collided.
    """
    for attempt in range(1, attempts + 1):
        number = generate()
        try:
            with transaction.atomic():
                return create(number)
        except IntegrityError:
            if existing is not None:
                found = existing()
                if found is not None:
                    return found
            logger.warning("Collision on %s %s (attempt %s/%s)", label, number, attempt, attempts)
    logger.error("Could not allocate a unique %s after %s attempts", label, attempts)
    raise ConflictError(f"Could not allocate a unique {label}")
