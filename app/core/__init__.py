"""
Core shared infrastructure.

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base for all application errors
    - ConfigurationError: Missing or invalid settings

Usage:
    from core.exceptions import ConfigurationError

Note:
    - Business logic should NOT go here. Extend core classes in domain packages.
"""

from .exceptions import (
    BaseApplicationError,
    ConfigurationError,
)

__all__ = [
    "BaseApplicationError",
    "ConfigurationError",
]
