"""Custom exceptions for the Meandering Sleep backend."""

from typing import Optional


class MeanderingException(Exception):
    """Base exception for the Meandering Sleep application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: str = "",
    ) -> None:
        """
        Initialize MeanderingException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details
        super().__init__(self.message)


class ConfigurationError(MeanderingException):
    """Raised when a required credential or target identifier is missing."""

    def __init__(
        self,
        message: str = "Service is not configured",
        details: str = "",
    ) -> None:
        """Initialize ConfigurationError."""
        super().__init__(
            message=message,
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )


class ValidationError(MeanderingException):
    """Raised when request validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: str = "",
    ) -> None:
        """Initialize ValidationError."""
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class GenerationServiceError(MeanderingException):
    """Raised when the text generation service fails or answers malformed."""

    def __init__(
        self,
        message: str = "Text generation failed",
        details: str = "",
    ) -> None:
        """Initialize GenerationServiceError."""
        super().__init__(
            message=message,
            status_code=502,
            error_code="GENERATION_SERVICE_ERROR",
            details=details,
        )


class GenerationDidNotConvergeError(MeanderingException):
    """Raised when a lecture run exhausts its chunk budget below target."""

    def __init__(
        self,
        message: str = "Generation did not converge",
        details: str = "",
    ) -> None:
        """Initialize GenerationDidNotConvergeError."""
        super().__init__(
            message=message,
            status_code=500,
            error_code="GENERATION_DID_NOT_CONVERGE",
            details=details,
        )


class NotFoundError(MeanderingException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: str = "",
    ) -> None:
        """Initialize NotFoundError."""
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class StorageError(MeanderingException):
    """Raised when the blob or document store cannot complete an operation."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        details: str = "",
    ) -> None:
        """Initialize StorageError."""
        super().__init__(
            message=message,
            status_code=500,
            error_code="STORAGE_ERROR",
            details=details,
        )
