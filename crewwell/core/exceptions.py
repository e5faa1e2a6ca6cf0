from typing import Any, Dict, Optional


class CrewWellError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(CrewWellError):
    """Rejected input: empty/oversized text, missing fields, mismatched answers."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, error_code="VALIDATION_ERROR", details=details)


class DuplicateCheckInError(CrewWellError):
    def __init__(self, message: str = "You have already checked in today"):
        super().__init__(message=message, status_code=409, error_code="DUPLICATE_CHECKIN")


class NotFoundError(CrewWellError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, status_code=404, error_code="NOT_FOUND")


class OwnershipError(CrewWellError):
    def __init__(self, message: str = "Unauthorized access to wellness check"):
        super().__init__(message=message, status_code=403, error_code="FORBIDDEN")


class ServiceUnavailableError(CrewWellError):
    """
    The generative text service failed (auth, timeout, HTTP error, malformed payload,
    missing configuration). Scoring paths absorb it into their deterministic fallback.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=503, error_code="AI_SERVICE_UNAVAILABLE", details=details)
