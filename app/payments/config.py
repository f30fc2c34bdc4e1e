"""
Settings and logging configuration for the Stripe lookups.

Configuration is driven by environment variables using django-environ,
following the 12-factor app methodology. Nothing reads the environment
implicitly: callers load a StripeSettings once and pass it on, or build
the adapter and classifier with explicit arguments.

Environment variables:
    STRIPE_API_KEY: Stripe secret key (required; STRIPE_SECRET_KEY also accepted)
    DEBUG_LOGGING: Log each resolution step at INFO (default: False)
    STRIPE_API_TIMEOUT_SECONDS: HTTP timeout per Stripe call (default: 10)
    STRIPE_MAX_RETRIES: Network retries done by the Stripe client (default: 0)
    LOG_LEVEL: Root log level for configure_logging (default: INFO)
    LOG_FILE: Optional path of a rotating log file

Usage:
    from payments.config import StripeSettings, configure_logging

    settings = StripeSettings.from_env(env_file=".env")
    configure_logging(settings)
"""

from __future__ import annotations

import logging.config
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import environ

from core.exceptions import ConfigurationError

env = environ.Env(
    DEBUG_LOGGING=(bool, False),
    STRIPE_API_TIMEOUT_SECONDS=(int, 10),
    STRIPE_MAX_RETRIES=(int, 0),
    LOG_LEVEL=(str, "INFO"),
)


@dataclass(frozen=True)
class StripeSettings:
    """
    Settings for the Stripe adapter and classifier.

    Attributes:
        api_key: Stripe secret key
        debug_logging: Log each resolution step at INFO instead of DEBUG
        timeout_seconds: HTTP timeout per Stripe call
        max_network_retries: Retries performed by the Stripe client itself
        log_level: Root log level
        log_file: Optional rotating log file path
    """

    api_key: str
    debug_logging: bool = False
    timeout_seconds: int = 10
    max_network_retries: int = 0
    log_level: str = "INFO"
    log_file: str | None = None

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "Missing env var: STRIPE_API_KEY",
                details={"setting": "STRIPE_API_KEY"},
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                "STRIPE_API_TIMEOUT_SECONDS must be positive",
                details={"value": self.timeout_seconds},
            )
        if self.max_network_retries < 0:
            raise ConfigurationError(
                "STRIPE_MAX_RETRIES must not be negative",
                details={"value": self.max_network_retries},
            )

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> StripeSettings:
        """
        Load settings from the process environment.

        Args:
            env_file: Optional .env file; its values never override
                variables already set in the environment

        Returns:
            StripeSettings

        Raises:
            ConfigurationError: STRIPE_API_KEY is missing or a value is invalid
        """
        if env_file is not None and Path(env_file).exists():
            environ.Env.read_env(str(env_file))

        api_key = env.str("STRIPE_API_KEY", default="") or env.str(
            "STRIPE_SECRET_KEY", default=""
        )

        try:
            return cls(
                api_key=api_key.strip(),
                debug_logging=env("DEBUG_LOGGING"),
                timeout_seconds=env("STRIPE_API_TIMEOUT_SECONDS"),
                max_network_retries=env("STRIPE_MAX_RETRIES"),
                log_level=env("LOG_LEVEL").upper(),
                log_file=env.str("LOG_FILE", default="") or None,
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid Stripe setting: {e}",
                details={"error": str(e)},
            ) from e


def build_logging_config(settings: StripeSettings) -> dict[str, Any]:
    """Return a logging.config.dictConfig mapping for the given settings."""
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    }
    if settings.log_file:
        # 10MB per file, 5 backups
        handlers["file"] = {
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": settings.log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "file",
            "encoding": "utf-8",
        }

    payments_level = "DEBUG" if settings.debug_logging else settings.log_level

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "{levelname} {asctime} {name} {message}",
                "style": "{",
            },
            "file": {
                "format": "[{asctime}] {levelname} {name} {module}:{lineno} - {message}",
                "style": "{",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {
            "handlers": list(handlers),
            "level": settings.log_level,
        },
        "loggers": {
            "payments": {
                "level": payments_level,
            },
            "stripe": {
                "level": "WARNING",
            },
        },
    }


def configure_logging(settings: StripeSettings) -> None:
    """Apply the logging configuration for command-line use."""
    logging.config.dictConfig(build_logging_config(settings))
