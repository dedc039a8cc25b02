"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict | None = None,
        code: str = "VAL_VALIDATION_ERROR",
    ) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class InvalidYouTubeUrlError(ValidationError):
    """Raised when no video identifier can be extracted from a URL."""

    def __init__(self, url: str) -> None:
        super().__init__(
            "Invalid YouTube URL",
            details={"url": url},
            code="VAL_INVALID_URL",
        )


class PayloadTooLargeError(ApplicationError):
    """Raised when an uploaded file exceeds the size ceiling."""

    def __init__(self, message: str = "Uploaded file is too large") -> None:
        super().__init__(message, code="VAL_PAYLOAD_TOO_LARGE")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class ExternalServiceError(ApplicationError):
    """Raised when an outside service answers with something unusable."""

    def __init__(self, message: str = "External service error") -> None:
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class FeatureDisabledError(ApplicationError):
    """Raised when a feature flag turns an endpoint off."""

    def __init__(self, message: str = "Feature disabled") -> None:
        super().__init__(message, code="SYS_FEATURE_DISABLED")


class CapabilityUnavailableError(ApplicationError):
    """
    Raised by stub analysis capabilities (text extraction, transcription,
    video metadata) that have no backing implementation configured.

    Caught inside the analysis layer; never reaches an HTTP handler.
    """

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(
            f"{capability} capability is not available",
            code="SYS_CAPABILITY_UNAVAILABLE",
        )
