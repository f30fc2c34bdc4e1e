"""
Base exception classes for application-wide error handling.

This module provides a small exception hierarchy shared by the payment
packages:
- Machine-readable error codes for callers and logs
- Detailed error context for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    └── ConfigurationError - Missing or invalid settings (fatal at startup)

Usage:
    from core.exceptions import ConfigurationError

    if not api_key:
        raise ConfigurationError(
            "Missing env var: STRIPE_API_KEY",
            details={"setting": "STRIPE_API_KEY"},
        )

    try:
        ...
    except BaseApplicationError as e:
        logger.warning("Lookup failed", extra=e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for programmatic handling
        details: Additional error context (ids, upstream codes, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a dictionary, e.g. for structured logging.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Missing env var: STRIPE_API_KEY",
                "error_code": "CONFIGURATION_ERROR",
                "details": {"setting": "STRIPE_API_KEY"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ConfigurationError(BaseApplicationError):
    """
    Raised when required configuration is missing or invalid.

    This is a startup failure: it is raised while constructing clients
    or loading settings and is never recovered from.

    Example:
        raise ConfigurationError(
            "STRIPE_API_TIMEOUT_SECONDS must be positive",
            details={"value": timeout},
        )
    """

    default_error_code: str = "CONFIGURATION_ERROR"
