"""
Custom exceptions for the pawpalace-core package.

This module defines the exception hierarchy and custom exceptions
used by the store, mail transport and reminder pass.
"""

from .core_exceptions import (
    BusinessRuleException,
    ConfigurationException,
    ConnectionException,
    DatabaseException,
    MailDeliveryException,
    NotificationException,
    PawPalaceException,
    ReminderPassException,
    TransactionException,
    ValidationException,
    create_error_response,
    handle_database_retry,
    log_exception_context,
)

__all__ = [
    # Exception classes
    "PawPalaceException",
    "DatabaseException",
    "ConnectionException",
    "TransactionException",
    "ValidationException",
    "BusinessRuleException",
    "ConfigurationException",
    "NotificationException",
    "MailDeliveryException",
    "ReminderPassException",
    # Utility functions
    "create_error_response",
    "handle_database_retry",
    "log_exception_context",
]
