"""
Stripe API adapter for payment lookups.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions needed by the bank transfer checks. It
implements the PaymentGateway protocol on top of an async
``stripe.StripeClient``.

Features:
- Configurable timeout on all API calls
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- No shared mutable state: safe for concurrent use from one event loop

Configuration (explicit constructor arguments, see payments.config):
- api_key: Stripe API secret key (required)
- timeout_seconds: API call timeout (default: 10)
- max_network_retries: Retries performed by the Stripe client (default: 0)

Usage:
    from payments.adapters import StripeAdapter

    adapter = StripeAdapter(api_key="sk_test_...")

    charge = await adapter.retrieve_charge("py_123")
    payment_intent = await adapter.retrieve_payment_intent("pi_123")
    customers = await adapter.search_customers("email:'a@b.com'")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import stripe

from core.exceptions import ConfigurationError
from payments.exceptions import (
    PaymentValidationError,
    StripeAPIUnavailableError,
    StripeAuthenticationError,
    StripeError,
    StripeInvalidRequestError,
    StripeRateLimitError,
)
from payments.types import Charge, Customer, PaymentIntent

if TYPE_CHECKING:
    from payments.config import StripeSettings


T = TypeVar("T")


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert a StripeObject (or plain mapping) into a dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, Mapping):
        return dict(obj)
    raise PaymentValidationError(
        "Unexpected Stripe response",
        details={"received": type(obj).__name__},
    )


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for read-only Stripe API operations.

    Each call issues exactly one request. Retries and timeouts are left to
    the underlying Stripe client; a failed call raises a StripeError
    subclass (see payments.exceptions).

    Usage:
        adapter = StripeAdapter.from_settings(settings)
        charge = await adapter.retrieve_charge("ch_123")
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout_seconds: int = 10,
        max_network_retries: int = 0,
        client: stripe.StripeClient | None = None,
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Stripe API secret key
            timeout_seconds: HTTP timeout for each call
            max_network_retries: Retries performed by the Stripe client
            client: Pre-built StripeClient (tests and custom transports)

        Raises:
            ConfigurationError: api_key is empty
        """
        if not api_key:
            raise ConfigurationError(
                "Missing env var: STRIPE_API_KEY",
                details={"setting": "STRIPE_API_KEY"},
            )

        if client is None:
            client = stripe.StripeClient(
                api_key,
                http_client=stripe.HTTPXClient(timeout=timeout_seconds),
                max_network_retries=max_network_retries,
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: StripeSettings) -> StripeAdapter:
        """Build an adapter from loaded settings."""
        return cls(
            settings.api_key,
            timeout_seconds=settings.timeout_seconds,
            max_network_retries=settings.max_network_retries,
        )

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Core Operations
    # =========================================================================

    async def retrieve_charge(self, charge_id: str) -> Charge:
        """
        Retrieve a Charge by ID.

        Args:
            charge_id: Stripe Charge ID (ch_xxx or py_xxx)

        Returns:
            Charge with payment method details and owning PaymentIntent ID

        Raises:
            StripeInvalidRequestError: Charge not found
            StripeAPIUnavailableError: Stripe service unavailable
            PaymentValidationError: Response could not be parsed
        """
        log_context = {
            "operation": "retrieve_charge",
            "charge_id": charge_id,
        }

        charge = await self._execute(
            log_context,
            lambda: self._client.v1.charges.retrieve_async(charge_id),
        )
        return Charge.from_stripe(_to_dict(charge))

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """
        Retrieve a PaymentIntent by ID.

        Older API versions embed the intent's charges in the response;
        newer ones only carry the latest_charge ID.

        Args:
            payment_intent_id: Stripe PaymentIntent ID (pi_xxx)

        Returns:
            PaymentIntent with latest_charge and any embedded charges

        Raises:
            StripeInvalidRequestError: PaymentIntent not found
            StripeAPIUnavailableError: Stripe service unavailable
            PaymentValidationError: Response could not be parsed
        """
        log_context = {
            "operation": "retrieve_payment_intent",
            "payment_intent_id": payment_intent_id,
        }

        intent = await self._execute(
            log_context,
            lambda: self._client.v1.payment_intents.retrieve_async(payment_intent_id),
        )
        return PaymentIntent.from_stripe(_to_dict(intent))

    async def search_customers(self, query: str) -> list[Customer]:
        """
        Search Customers with Stripe's search query language.

        Only the first result page is returned.

        Args:
            query: Search query, e.g. "email:'a@b.com'"

        Returns:
            List of matching Customers (possibly empty)

        Raises:
            StripeInvalidRequestError: Malformed query
            StripeAPIUnavailableError: Stripe service unavailable
        """
        log_context = {
            "operation": "search_customers",
            "query": query,
        }

        result = await self._execute(
            log_context,
            lambda: self._client.v1.customers.search_async(params={"query": query}),
        )
        return [Customer.from_stripe(_to_dict(item)) for item in result.data]

    async def _execute(
        self,
        log_context: dict[str, Any],
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """Await a Stripe call with timing logs and error translation."""
        logger = self.get_logger()

        start_time = time.time()
        logger.debug("Starting Stripe operation", extra=log_context)

        try:
            response = await call()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_stripe_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            "Stripe operation completed",
            extra={**log_context, "duration_ms": duration_ms},
        )
        return response

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        Args:
            error: The Stripe exception
            log_context: Logging context dict
            duration_ms: Operation duration for logging

        Raises:
            StripeInvalidRequestError: Invalid request or missing resource
            StripeAuthenticationError: Invalid API key or insufficient permissions
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: Network, server, or unexpected error
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.InvalidRequestError):
            logger.warning(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise StripeInvalidRequestError(
                str(error.user_message or error),
                stripe_code=error.code,
            )

        elif isinstance(error, (stripe.AuthenticationError, stripe.PermissionError)):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise StripeAuthenticationError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            )

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise StripeRateLimitError(
                "Stripe rate limit exceeded",
                stripe_code="rate_limit",
            )

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe",
                stripe_code="api_connection_error",
            )

        elif isinstance(error, stripe.APIError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise StripeAPIUnavailableError(
                "Stripe service error",
                stripe_code="api_error",
            )

        elif isinstance(error, stripe.StripeError):
            logger.error(
                f"Stripe error: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeError(str(error), stripe_code=error.code)

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            )
