"""
Core exceptions for the pawpalace-core package.

This module defines the exception hierarchy used by the data layer, the
mail transport and the vaccination reminder pass, together with helpers for
turning exceptions into log records and API error payloads.
"""

import asyncio
import logging
import time
import traceback
from typing import Any, Dict, Optional
from urllib.parse import urlparse, urlunparse


class PawPalaceException(Exception):
    """
    Base exception class for all pawpalace-core exceptions.

    Carries a human-readable message, a machine-readable error code and a
    free-form details mapping.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """Get the dictionary form plus module, class and current traceback."""
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with structured context.

        Args:
            logger: Logger instance to use (module logger if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DatabaseException(PawPalaceException):
    """Base exception for document store errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        retry_count: int = 0,
        max_retries: int = 3,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
            retry_count: Current retry attempt count
            max_retries: Maximum number of retry attempts
        """
        super().__init__(message, error_code, details)
        self.original_error = original_error
        self.retry_count = retry_count
        self.max_retries = max_retries

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)

        self.details.update(
            {
                "retry_count": retry_count,
                "max_retries": max_retries,
                "retryable": self.is_retryable(),
            }
        )

    def is_retryable(self) -> bool:
        """Return True while retry attempts remain."""
        return self.retry_count < self.max_retries


class ConnectionException(DatabaseException):
    """Exception raised when the document store cannot be reached."""

    NON_RETRYABLE_PATTERNS = (
        "authentication failed",
        "invalid credentials",
        "access denied",
        "permission denied",
        "database does not exist",
        "role does not exist",
    )

    def __init__(
        self,
        message: str = "Database connection failed",
        database_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        retry_count: int = 0,
        max_retries: int = 3,
    ):
        """
        Initialize connection exception.

        Args:
            message: Error message
            database_url: Database URL (credentials are stripped)
            original_error: Original exception
            retry_count: Current retry attempt count
            max_retries: Maximum number of retry attempts
        """
        details = {}
        if database_url:
            details["database_url"] = self._sanitize_url(database_url)

        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR",
            details=details,
            original_error=original_error,
            retry_count=retry_count,
            max_retries=max_retries,
        )

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from a database URL for logging."""
        try:
            parsed = urlparse(url)
            if not parsed.hostname:
                return urlunparse(parsed)
            netloc = parsed.hostname
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
        except (ValueError, AttributeError) as e:
            return f"[URL_PARSE_ERROR: {e}]"

    def is_retryable(self) -> bool:
        """Connection errors are retryable unless they look like auth/config errors."""
        if not super().is_retryable():
            return False

        if self.original_error:
            error_str = str(self.original_error).lower()
            if any(pattern in error_str for pattern in self.NON_RETRYABLE_PATTERNS):
                return False

        return True


class TransactionException(DatabaseException):
    """Exception raised when a database transaction fails."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize transaction exception.

        Args:
            message: Error message
            operation: Description of the failed operation
            original_error: Original exception
        """
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_TRANSACTION_ERROR",
            details=details,
            original_error=original_error,
            max_retries=0,
        )


class ValidationException(PawPalaceException):
    """Base exception for data validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class BusinessRuleException(ValidationException):
    """Exception raised when a listing or adoption business rule is violated."""

    def __init__(
        self,
        message: str = "Business rule validation failed",
        rule_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize business rule exception.

        Args:
            message: Error message
            rule_name: Name of the business rule that failed
            context: Additional context about the failure
        """
        super().__init__(message=message)
        self.error_code = "BUSINESS_RULE_ERROR"
        if rule_name:
            self.details["rule_name"] = rule_name
        if context:
            self.details["context"] = context


class ConfigurationException(PawPalaceException):
    """Exception raised for invalid runtime configuration."""

    SENSITIVE_KEYS = ("password", "pass", "secret", "key", "token", "credential")

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (sensitive values are redacted)
        """
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @classmethod
    def _sanitize_config_value(cls, key: Optional[str], value: str) -> str:
        """Redact configuration values whose key looks like a secret."""
        if not key:
            return "[REDACTED]"
        if any(sensitive in key.lower() for sensitive in cls.SENSITIVE_KEYS):
            return "[REDACTED]"
        return value


class NotificationException(PawPalaceException):
    """Base exception for outbound notification errors."""

    def __init__(
        self,
        message: str = "Notification failed",
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, error_code or "NOTIFICATION_ERROR", details)
        self.original_error = original_error
        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class MailDeliveryException(NotificationException):
    """Exception raised when the mail transport rejects or fails a message."""

    def __init__(
        self,
        message: str = "Mail delivery failed",
        recipient: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize mail delivery exception.

        Args:
            message: Error message
            recipient: Address the message was meant for
            original_error: Transport exception
        """
        details = {}
        if recipient:
            details["recipient"] = recipient

        super().__init__(
            message=message,
            error_code="MAIL_DELIVERY_ERROR",
            details=details,
            original_error=original_error,
        )
        self.recipient = recipient


class ReminderPassException(PawPalaceException):
    """Exception raised when a whole vaccination reminder pass cannot proceed."""

    def __init__(
        self,
        message: str = "Vaccination reminder pass failed",
        as_of: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if as_of:
            details["as_of"] = as_of
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message,
            error_code="REMINDER_PASS_ERROR",
            details=details,
        )
        self.original_error = original_error


# Utility functions for exception handling and error formatting


def create_error_response(
    exception: PawPalaceException,
    include_debug: bool = False,
    include_traceback: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information
        include_traceback: Whether to include traceback information

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "message": exception.message,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

        if include_traceback and debug_info.get("traceback"):
            response["debug"]["traceback"] = debug_info["traceback"]

    return response


def handle_database_retry(
    operation_name: str,
    max_retries: int = 3,
    base_delay: float = 1.0,
    logger: Optional[logging.Logger] = None,
):
    """
    Decorator for async store operations with exponential-backoff retries.

    Only ``DatabaseException`` instances that report themselves retryable are
    retried; any other exception propagates immediately.

    Args:
        operation_name: Name of the operation for logging
        max_retries: Maximum number of retry attempts
        base_delay: Base delay for exponential backoff
        logger: Logger instance to use

    Returns:
        Decorator function
    """

    def decorator(func):
        async def wrapper(*args, **kwargs):
            operation_logger = logger or logging.getLogger(__name__)

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except DatabaseException as e:
                    if not e.is_retryable() or attempt == max_retries:
                        operation_logger.error(
                            f"Database operation '{operation_name}' failed after {attempt + 1} attempts",
                            extra={"exception_data": e.to_dict()},
                        )
                        raise

                    delay = base_delay * (2**attempt)
                    operation_logger.warning(
                        f"Database operation '{operation_name}' failed (attempt {attempt + 1}/{max_retries + 1}), "
                        f"retrying in {delay}s",
                        extra={"exception_data": e.to_dict()},
                    )
                    await asyncio.sleep(delay)
                except Exception as e:
                    operation_logger.error(
                        f"Non-retryable error in database operation '{operation_name}'",
                        extra={"error": str(e)},
                    )
                    raise

        wrapper.__name__ = getattr(func, "__name__", "wrapper")
        wrapper.__doc__ = getattr(func, "__doc__", None)
        return wrapper

    return decorator


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information (pet id, recipient, ...)
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, PawPalaceException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unexpected exception: {str(exception)}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )
