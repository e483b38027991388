"""
Seva Backend Custom Exceptions

This module provides the exception classes raised by the integration layer
(payment gateway, object storage, email). They follow a hierarchical
structure so views can catch a whole family of failures at once, and the
DRF exception handler can turn any of them into a JSON error response.

Author: Seva Development Team
Version: 1.0.0
"""

from typing import Optional, Dict, Any


class SevaException(Exception):
    """
    Base exception class for all integration errors raised by this project.

    Attributes:
        message (str): Human-readable error message
        status_code (Optional[int]): HTTP status code to answer with
        error_code (Optional[str]): Provider specific error code
        details (Optional[Dict[str, Any]]): Additional error details

    Example:
        >>> try:
        ...     client.pay(order)
        ... except SevaException as e:
        ...     logger.error(f"Integration error: {e.message}")
    """

    default_status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize an integration exception.

        Args:
            message: Human-readable error description
            status_code: HTTP status code for the API response
            error_code: Provider specific error identifier
            details: Additional context or error details
        """
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }


class PaymentGatewayException(SevaException):
    """
    Exception for failed calls to the payment gateway.

    Attributes:
        operation (Optional[str]): Gateway operation that failed, e.g. "pay"
    """

    default_status_code = 502

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        super().__init__(message, status_code, error_code, details)


class PaymentAuthException(PaymentGatewayException):
    """Raised when the OAuth client-credentials token cannot be obtained."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, operation="oauth_token", details=details)


class WebhookValidationException(SevaException):
    """Raised when a gateway callback carries a missing or wrong Authorization header."""

    default_status_code = 401


class StorageException(SevaException):
    """
    Exception for object storage failures (upload, delete, read).

    Attributes:
        key (Optional[str]): Object key involved in the failed operation
    """

    default_status_code = 502

    def __init__(self, message: str, key: Optional[str] = None, **kwargs: Any) -> None:
        self.key = key
        super().__init__(message, **kwargs)


class StorageObjectNotFound(StorageException):
    """Raised when a requested object does not exist in the bucket."""

    default_status_code = 404


class NotificationException(SevaException):
    """Raised when a transactional email cannot be delivered."""

    default_status_code = 502
