"""
DRF exception handler that turns domain errors into JSON responses.

Registered as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.  Anything that is
not a ``DomainError`` is left to DRF's default handler.
"""
import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        view = context.get("view")
        if exc.status_code >= 500:
            logger.error("%s failed: %s", view.__class__.__name__ if view else "request", exc)
        return Response(exc.to_dict(), status=exc.status_code)
    return exception_handler(exc, context)
