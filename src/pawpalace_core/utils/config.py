"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration, and the settings objects
consumed by the store, the mail transport and the reminder scheduler.
"""

import json
import logging
import logging.config
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qs, urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConfigurationException

TRUTHY_VALUES = ("true", "1", "yes", "on", "enabled")


class ConfigError(ConfigurationException):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, config_key=config_key)


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set", key)

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set", key
                )
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}", key
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        ``true``, ``1``, ``yes``, ``on`` and ``enabled`` (any case) are true;
        every other value is false.
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set", key
                )
            return default

        return value.lower() in TRUTHY_VALUES

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> Optional[List[str]]:
        """Get a separator-delimited list environment variable (empty items dropped)."""
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set", key
                )
            return default or []

        return [item.strip() for item in value.split(separator) if item.strip()]

    @staticmethod
    def get_json(
        key: str, default: Optional[Dict[str, Any]] = None, required: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Get a JSON object environment variable.

        Raises:
            ConfigError: If required variable is missing or not a JSON object
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set", key
                )
            return default

        try:
            result = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Environment variable '{key}' contains invalid JSON: {e}", key
            )

        if not isinstance(result, dict):
            raise ConfigError(f"Environment variable '{key}' must be a JSON object", key)
        return result


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: Optional[str]) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Raises:
            ConfigError: If URL is empty, uses an unsupported driver, or lacks
                a host/database name where the driver needs one
        """
        if not url:
            raise ConfigError("Database URL cannot be empty", "DATABASE_URL")

        parsed = urlparse(url)

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql+asyncpg://)",
                "DATABASE_URL",
            )

        supported = [d for drivers in cls.SUPPORTED_DRIVERS.values() for d in drivers]
        if parsed.scheme not in supported:
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported)}",
                "DATABASE_URL",
            )

        is_sqlite = parsed.scheme.startswith("sqlite")
        if not is_sqlite:
            if not parsed.hostname:
                raise ConfigError("Database URL must include a hostname", "DATABASE_URL")
            if not parsed.path.lstrip("/"):
                raise ConfigError(
                    "Database URL must include a database name", "DATABASE_URL"
                )

        return {
            "valid": True,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "username": parsed.username,
            "query": dict(parse_qs(parsed.query)),
        }


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
            level: Level for the ``pawpalace_core`` logger tree when the
                default configuration is used
        """
        if isinstance(level, LogLevel):
            level = level.value

        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            default_config = {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                    "detailed": {
                        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "standard",
                        "stream": "ext://sys.stdout",
                    }
                },
                "loggers": {
                    "pawpalace_core": {
                        "level": level,
                        "handlers": ["console"],
                        "propagate": False,
                    }
                },
                "root": {"level": "WARNING", "handlers": ["console"]},
            }
            logging.config.dictConfig(default_config)


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings for the document store."""

    url: Optional[str] = None
    pool_size: int = 10
    echo: bool = False

    @classmethod
    def from_environment(cls) -> "DatabaseSettings":
        """Read ``DATABASE_URL``, ``DB_POOL_SIZE`` and ``DB_ECHO``."""
        url = EnvironmentConfig.get_str("DATABASE_URL")
        if url:
            DatabaseURLValidator.validate_url(url)
        return cls(
            url=url,
            pool_size=EnvironmentConfig.get_int("DB_POOL_SIZE", 10),
            echo=EnvironmentConfig.get_bool("DB_ECHO", False),
        )

    def require_url(self) -> str:
        """Return the database URL, raising ConfigError when it is not configured."""
        if not self.url:
            raise ConfigError(
                "Required environment variable 'DATABASE_URL' is not set",
                "DATABASE_URL",
            )
        return self.url


@dataclass(frozen=True)
class MailSettings:
    """SMTP transport and reminder template settings."""

    host: str = "smtp.gmail.com"
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    use_tls: bool = True
    workers: int = 4
    product_name: str = "PawPalace"

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigError("MAIL_WORKERS must be at least 1", "MAIL_WORKERS")

    @property
    def from_address(self) -> Optional[str]:
        """Envelope sender: explicit ``MAIL_FROM`` or the SMTP login."""
        return self.sender or self.username

    @property
    def is_configured(self) -> bool:
        """Check if enough is configured to log in and send."""
        return bool(self.host and self.username and self.password)

    @classmethod
    def from_environment(cls) -> "MailSettings":
        """Read the ``MAIL_*`` variables and ``PRODUCT_NAME``."""
        return cls(
            host=EnvironmentConfig.get_str("MAIL_HOST", "smtp.gmail.com"),
            port=EnvironmentConfig.get_int("MAIL_PORT", 587),
            username=EnvironmentConfig.get_str("MAIL_USER"),
            password=EnvironmentConfig.get_str("MAIL_PASS"),
            sender=EnvironmentConfig.get_str("MAIL_FROM"),
            use_tls=EnvironmentConfig.get_bool("MAIL_USE_TLS", True),
            workers=EnvironmentConfig.get_int("MAIL_WORKERS", 4),
            product_name=EnvironmentConfig.get_str("PRODUCT_NAME", "PawPalace"),
        )


@dataclass(frozen=True)
class ReminderSettings:
    """Daily trigger and evaluation settings for vaccination reminders."""

    hour: int = 9
    minute: int = 0
    timezone: str = "UTC"
    run_on_startup: bool = True
    dedup_ledger: bool = False
    vaccine_intervals: Optional[Mapping[str, int]] = None

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ConfigError("REMINDER_HOUR must be between 0 and 23", "REMINDER_HOUR")
        if not 0 <= self.minute <= 59:
            raise ConfigError(
                "REMINDER_MINUTE must be between 0 and 59", "REMINDER_MINUTE"
            )
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(
                f"Unknown timezone '{self.timezone}'", "REMINDER_TIMEZONE"
            )

    @classmethod
    def from_environment(cls) -> "ReminderSettings":
        """Read the ``REMINDER_*`` variables and the ``VACCINE_INTERVALS`` override."""
        return cls(
            hour=EnvironmentConfig.get_int("REMINDER_HOUR", 9),
            minute=EnvironmentConfig.get_int("REMINDER_MINUTE", 0),
            timezone=EnvironmentConfig.get_str("REMINDER_TIMEZONE", "UTC"),
            run_on_startup=EnvironmentConfig.get_bool("REMINDER_RUN_ON_STARTUP", True),
            dedup_ledger=EnvironmentConfig.get_bool("REMINDER_DEDUP_LEDGER", False),
            vaccine_intervals=EnvironmentConfig.get_json("VACCINE_INTERVALS"),
        )


@dataclass(frozen=True)
class AppSettings:
    """Aggregate settings for the reminder service process."""

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    mail: MailSettings = field(default_factory=MailSettings)
    reminders: ReminderSettings = field(default_factory=ReminderSettings)
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_environment(cls) -> "AppSettings":
        """Build every settings group from the process environment."""
        log_level = (EnvironmentConfig.get_str("LOG_LEVEL", "INFO") or "INFO").upper()
        if log_level not in LogLevel.__members__:
            raise ConfigError(f"Unknown log level '{log_level}'", "LOG_LEVEL")

        return cls(
            database=DatabaseSettings.from_environment(),
            mail=MailSettings.from_environment(),
            reminders=ReminderSettings.from_environment(),
            log_level=log_level,
            cors_origins=EnvironmentConfig.get_list("CORS_ORIGINS", default=["*"]),
        )
