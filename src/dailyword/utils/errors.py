"""Centralized error types and handling helpers."""

from enum import Enum
from typing import Any, Callable, Dict, Optional

from .logging import get_logger

_logger = None


def _get_logger():
    """Get logger with lazy initialisation."""
    global _logger
    if _logger is None:
        _logger = get_logger(__name__)
    return _logger


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    STORAGE = "storage"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    FILE_SYSTEM = "file_system"
    SHARE = "share"
    UNKNOWN = "unknown"


## Custom Exceptions


class DailyWordError(Exception):
    """Base exception for all Daily Word errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise DailyWordError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Storage Errors


class StorageError(DailyWordError):
    """Base exception for draft storage errors."""

    category = ErrorCategory.STORAGE
    user_message = "A storage error occurred"


class StorageUnavailableError(StorageError):
    """Exception when local storage cannot be used at all."""

    user_message = "Local storage is unavailable"


class StorageWriteError(StorageError):
    """Exception for a failed write or delete against local storage."""

    user_message = "Failed to write to local storage"


class CorruptDraftError(StorageError):
    """Exception for a stored draft that cannot be parsed."""

    user_message = "Saved draft is corrupted"


## Validation Errors


class ValidationError(DailyWordError):
    """Exception for invalid arguments or values."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


## File System Errors


class FileSystemError(DailyWordError):
    """Base exception for file system-related errors."""

    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file system error occurred"


## Configuration Errors


class ConfigurationError(DailyWordError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class MissingConfigError(ConfigurationError):
    """Exception for missing configuration settings."""

    user_message = "Missing configuration settings"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Share Errors


class ShareError(DailyWordError):
    """Exception when the share link cannot be opened."""

    category = ErrorCategory.SHARE
    user_message = "Could not open the share link"


## Error Handler


class ErrorHandler:
    """Centralized error handling and logging."""

    @staticmethod
    def handle(
        error: Exception, context: str = "", log_traceback: bool = True
    ) -> Dict[str, Any]:
        """Handle errors with logging and user-friendly message."""
        if isinstance(error, DailyWordError):
            _get_logger().error(f"{context}: {error.message}", extra={"context": error.details})
            if log_traceback:
                _get_logger().exception(error)
            return error.to_dict()
        else:
            _get_logger().error(f"{context}: {str(error)}")
            if log_traceback:
                _get_logger().exception(error)
            return {
                "error_type": "UnknownError",
                "category": ErrorCategory.UNKNOWN.value,
                "message": str(error),
                "details": {"context": context},
            }


## Context Manager for Error Handling


class error_context:
    """Context manager for error handling."""

    def __init__(
        self,
        context: str = "",
        user_message: Optional[str] = None,
        reraise: bool = True,
    ):
        self.context = context
        self.user_message = user_message
        self.reraise = reraise
        self.error = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        """Log the exception and swallow it unless asked to reraise."""
        if exc_type is None:
            return False

        self.error = ErrorHandler.handle(exc_value, self.context)

        return not self.reraise


## Utility Functions


def safe_execute(func: Callable, *args, default=None, context: str = "", **kwargs):
    """Execute a function safely with error handling."""
    try:
        return func(*args, **kwargs)

    except Exception as e:
        ErrorHandler.handle(e, context, log_traceback=False)
        return default


def format_error_message(error: Exception) -> str:
    """Format an error message for display."""
    if isinstance(error, DailyWordError):
        return error.message
    else:
        return "An unexpected error occurred - check logs for details."
