"""
Custom Exception Classes

Defines the runtime client's error taxonomy.
The runtime loop only distinguishes retryable client errors from
configuration errors; the subclasses carry detail for logs and tests.
"""

from typing import Optional


class RuntimeClientError(Exception):
    """Base exception for runtime client errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize runtime client error.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(RuntimeClientError):
    """Exception raised for missing or unusable process configuration."""

    def __init__(self, message: str, error_type: str = None, details: dict = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            error_type: errorType reported to the init-error endpoint
            details: Additional error details
        """
        super().__init__(message, details)
        self.error_type = error_type or "Runtime.ConfigurationError"


class UnexpectedError(RuntimeClientError):
    """Exception raised when a next-invocation response violates the protocol."""

    def __init__(self, message: str, header: str = None, details: dict = None):
        """
        Initialize protocol error.

        Args:
            message: Error message
            header: Name of the missing or malformed response header
            details: Additional error details
        """
        super().__init__(message, details)
        self.header = header


class RuntimeAPIError(RuntimeClientError):
    """Exception raised when the Runtime API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int = None, details: dict = None):
        """
        Initialize Runtime API error.

        Args:
            message: Error message
            status_code: HTTP status code
            details: Additional error details
        """
        super().__init__(message, details)
        self.status_code = status_code


class TransportError(RuntimeClientError):
    """Exception raised when no HTTP response could be obtained at all."""

    pass


class RetryBudgetExhaustedError(RuntimeClientError):
    """Exception raised by the runtime loop once its retry budget is spent."""

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        last_error: Optional[RuntimeClientError] = None,
        details: dict = None,
    ):
        super().__init__(message, details)
        self.attempts = attempts
        self.last_error = last_error
