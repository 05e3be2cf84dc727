class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` and ``http_status`` let the HTTP boundary pick a response without
    inspecting messages.
    """

    code = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class InvalidQrError(DomainError):
    """Raised when a scanned payload does not decode to a student identity."""

    code = "invalid_qr"


class RecordNotFoundError(DomainError):
    """Raised when marking against a record the teacher never created."""

    code = "record_not_found"
    http_status = 404


class DuplicateAttendanceError(DomainError):
    """Raised when the student is already marked for the record."""

    code = "duplicate_attendance"


class ForbiddenError(DomainError):
    """Raised when a teacher reads another teacher's record without admin rights."""

    code = "forbidden"
    http_status = 403


class AuthenticationError(DomainError):
    """Raised when login credentials or bearer tokens are invalid."""

    code = "unauthorized"
    http_status = 401


class StoreUnavailableError(DomainError):
    """Raised when the row store call failed (transport or API error).

    Retryable from the caller's point of view; the adapter never retries.
    """

    code = "store_unavailable"
    http_status = 502


class StoreConflictError(DomainError):
    """Raised when an optimistic write saw the table change underneath it."""

    code = "store_conflict"
    http_status = 409


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing."""
