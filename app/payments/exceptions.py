"""
Payment-specific exceptions for Stripe lookups.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentValidationError - Malformed or unexpected Stripe payloads
    └── PaymentProcessingError - Payment gateway failures
        └── StripeError - Base for all Stripe errors
            ├── StripeInvalidRequestError - Invalid request / resource missing (permanent)
            ├── StripeAuthenticationError - Bad API key or permissions (permanent)
            ├── StripeRateLimitError - Rate limited (transient)
            └── StripeAPIUnavailableError - Network or server error (transient)

The classifier never lets these escape: they are raised by the adapter
and converted into a negative result at the classification boundary.

Usage:
    from payments.exceptions import StripeError

    try:
        charge = await adapter.retrieve_charge("py_123")
    except StripeError as e:
        logger.warning("Charge lookup failed", extra=e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class PaymentValidationError(PaymentError):
    """
    Raised when a Stripe payload cannot be parsed into a domain type.

    Use for:
    - Missing object id
    - Wrong object shape (e.g. a list where a dict is expected)

    Example:
        if not data.get("id"):
            raise PaymentValidationError(
                "Charge payload has no id",
                details={"object": data.get("object")},
            )
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


class PaymentProcessingError(PaymentError):
    """Raised when a payment gateway call fails."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(PaymentProcessingError):
    """
    Base exception for all Stripe-related errors.

    Attributes:
        stripe_code: Stripe's internal error code
        is_retryable: Whether the call could succeed if repeated
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = {**(details or {})}
        if stripe_code:
            details["stripe_code"] = stripe_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code


class StripeInvalidRequestError(StripeError):
    """
    Invalid request parameters sent to Stripe.

    Possible causes:
    - Unknown charge or payment intent id (resource_missing)
    - Malformed search query
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"
    is_retryable: bool = False


class StripeAuthenticationError(StripeError):
    """
    The API key was rejected or lacks permission for the resource.

    Operational issue: check STRIPE_API_KEY.
    """

    default_error_code: str = "STRIPE_AUTHENTICATION_FAILED"
    is_retryable: bool = False


class StripeRateLimitError(StripeError):
    """
    Rate limited by Stripe API.

    Stripe allows 100 requests/second in live mode, 25/second in test mode.
    """

    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """
    Stripe API is temporarily unavailable.

    This covers:
    - Network connectivity issues and timeouts
    - Stripe server errors (5xx)
    - Unexpected errors raised by the SDK
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True
