"""Custom exception hierarchy for the application."""

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of failure, each mapped to a documented degradation."""

    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSFORM = "transform"
    NO_DATA = "no_data"
    CONFLICT = "conflict"
    INVALID_INPUT = "invalid_input"


class AppError(Exception):
    """Base exception for the application."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if kind is not None:
            self.kind = kind


class ServiceRequestError(AppError):
    """Raised when a remote service call fails or the service reports an error."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"{service} request failed: {message}", code="SERVICE_REQUEST_FAILED")
        self.service = service


class ServiceResponseError(AppError):
    """Raised when a remote service answers with a body that cannot be understood."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"Malformed {service} response: {message}", code="MALFORMED_RESPONSE")
        self.service = service


class ProjectionError(AppError):
    """Raised when a spatial reference cannot be resolved or transformed."""

    kind = ErrorKind.TRANSFORM

    def __init__(self, spatial_reference_id: int, message: str) -> None:
        super().__init__(
            f"Cannot project from spatial reference {spatial_reference_id}: {message}",
            code="PROJECTION_FAILED",
        )
        self.spatial_reference_id = spatial_reference_id


class BufferModeConflictError(AppError):
    """Raised when a writer targets the elevation buffer while another mode owns it."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str) -> None:
        super().__init__(message, code="BUFFER_MODE_CONFLICT")


class InvalidSelectionError(AppError):
    """Raised when a suggestion index does not refer to a displayed candidate."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, index: int, candidate_count: int) -> None:
        super().__init__(
            f"Invalid suggestion index {index}: {candidate_count} candidate(s) available",
            code="INVALID_SELECTION",
        )
        self.index = index
