"""
Domain errors shared by the registration, ticketing and certificate apps.

Every error carries a stable ``ErrorCode``, a user-safe message, the HTTP
status the API layer should answer with, and optional ``details`` that
are merged into the JSON body (for example the payment reference on a
duplicate registration).  Services raise these; views never build error
responses by hand, ``common.exceptions.domain_exception_handler`` does.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SIGNATURE_MISMATCH = "SIGNATURE_MISMATCH"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    CONFLICT = "CONFLICT"
    REGISTRATION_INCOMPLETE = "REGISTRATION_INCOMPLETE"
    TICKET_STATE = "TICKET_STATE"
    DOWNSTREAM_DELIVERY = "DOWNSTREAM_DELIVERY"
    PAYMENT_PROVIDER = "PAYMENT_PROVIDER"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, **details) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "success": False,
            "message": self.message,
            "code": self.code.value,
            **self.details,
        }


class ConfigurationError(DomainError):
    """Raised when required settings (signing secret, API keys) are missing."""

    code = ErrorCode.CONFIGURATION_ERROR
    status_code = 500
    default_message = "Service is not configured"


class ValidationError(DomainError):
    """Missing or invalid input; the caller can correct it."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid request"


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class EventNotFound(NotFound):
    default_message = "Event not found"


class ParticipantNotFound(NotFound):
    default_message = "Participant not found"


class TemplateNotFound(NotFound):
    default_message = "Certificate template not found"


class CertificateNotFound(NotFound):
    default_message = "Certificate not found"


class SignatureMismatch(DomainError):
    """The payment callback signature does not match.

    The message is fixed so the computed signature never reaches the client.
    """

    code = ErrorCode.SIGNATURE_MISMATCH
    status_code = 400
    default_message = "Payment verification failed - invalid signature"


class DuplicateRegistration(DomainError):
    """The participant is already registered; the charge has already happened."""

    code = ErrorCode.DUPLICATE_REGISTRATION
    status_code = 400
    default_message = "You are already registered for this event"

    def __init__(self, message: str | None = None, *, payment_id: str | None = None) -> None:
        details = {"paymentId": payment_id} if payment_id else {}
        super().__init__(message, **details)
        self.payment_id = payment_id


class ConflictError(DomainError):
    """A store-level uniqueness constraint was hit and could not be resolved."""

    code = ErrorCode.CONFLICT
    status_code = 409
    default_message = "Conflicting update, please retry"


class RegistrationIncomplete(DomainError):
    """Payment was verified but the participant could not be registered."""

    code = ErrorCode.REGISTRATION_INCOMPLETE
    status_code = 500
    default_message = "Payment successful but registration failed. Please contact support."

    def __init__(self, message: str | None = None, *, payment_id: str, reason: str = "") -> None:
        super().__init__(message, paymentId=payment_id)
        self.payment_id = payment_id
        self.reason = reason


class TicketStateError(DomainError):
    """Invalid ticket transition (check-in of a cancelled ticket, etc.)."""

    code = ErrorCode.TICKET_STATE
    status_code = 409
    default_message = "Ticket cannot be updated in its current state"

    def __init__(self, message: str | None = None, *, reason: str, **details) -> None:
        super().__init__(message, reason=reason, **details)
        self.reason = reason


class TicketAlreadyUsed(TicketStateError):
    def __init__(self, message: str | None = None, **details) -> None:
        super().__init__(message or "Ticket is already used", reason="already used", **details)


class TicketNotFound(NotFound):
    default_message = "Ticket not found"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, reason="not found")


class DownstreamDeliveryError(DomainError):
    """Email or document generation failed; the owning operation still stands."""

    code = ErrorCode.DOWNSTREAM_DELIVERY
    status_code = 502
    default_message = "Delivery failed"


class ArtifactRenderError(DownstreamDeliveryError):
    default_message = "Could not render document"


class PaymentProviderError(DomainError):
    code = ErrorCode.PAYMENT_PROVIDER
    status_code = 502
    default_message = "Payment provider request failed"
