"""
Utility functions and helper modules.

This module provides common utility functions for calendar-date handling,
validation, and configuration management.
"""

from .datetime_utils import (
    add_days,
    format_calendar_date,
    get_current_utc,
    get_current_utc_date,
    next_daily_run,
    parse_calendar_date,
    seconds_until,
)

from .validation import (
    ValidationError,
    ValidationResult,
    normalize_key,
    sanitize_string,
    validate_email,
)

from .config import (
    AppSettings,
    ConfigError,
    DatabaseSettings,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
    MailSettings,
    ReminderSettings,
)

__all__ = [
    # DateTime utilities
    "add_days",
    "format_calendar_date",
    "get_current_utc",
    "get_current_utc_date",
    "next_daily_run",
    "parse_calendar_date",
    "seconds_until",
    # Validation helpers
    "ValidationError",
    "ValidationResult",
    "normalize_key",
    "sanitize_string",
    "validate_email",
    # Configuration utilities
    "AppSettings",
    "ConfigError",
    "DatabaseSettings",
    "DatabaseURLValidator",
    "EnvironmentConfig",
    "LoggingConfigurator",
    "LogLevel",
    "MailSettings",
    "ReminderSettings",
]
