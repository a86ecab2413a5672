"""
Custom exceptions for the import engine.

Only pre-parse conditions escape to the caller. Row-scoped problems are
collected into the import outcome instead of being raised.
"""
from typing import Any, Dict, Optional


class ImportEngineException(Exception):
    """Base exception for all spreadsheet import errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FileProcessingError(ImportEngineException):
    """Raised when an uploaded file cannot be processed at all."""
    pass


class EmptyFileError(FileProcessingError):
    """Raised when the uploaded file has no content."""
    pass


class FileTooLargeError(FileProcessingError):
    """Raised when the uploaded file exceeds the configured size limit."""
    pass


class UnsupportedFormatError(FileProcessingError):
    """Raised when the file format cannot be classified."""
    pass


class ParsingError(FileProcessingError):
    """Raised when a spreadsheet cannot be read."""
    pass


class CoercionError(ImportEngineException):
    """Raised when a cell cannot be converted to its typed value."""

    def __init__(
        self,
        message: str,
        field: str,
        value: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigurationError(ImportEngineException):
    """Raised when configuration is invalid."""
    pass
