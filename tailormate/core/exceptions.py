"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AppError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class PipelineError(AppError):
    """Base exception for intake run failures."""
    pass


class SessionRequiredError(PipelineError):
    """No active session: the run aborts before any side effect."""
    pass


class UploadError(PipelineError):
    """A document upload failed; the whole upload batch is considered failed."""
    pass


class ExtractionServiceError(PipelineError):
    """The extraction endpoint answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.status_code = status_code


class ReconciliationError(PipelineError):
    """A database write failed while saving extraction results.

    Results before ``result_index`` are already committed.
    """

    def __init__(
        self,
        message: str,
        result_index: Optional[int] = None,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.result_index = result_index
