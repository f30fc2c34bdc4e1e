"""
Bank transfer classification for Stripe charges and payment intents.

This module provides the BankTransferClassifier class which answers
"was this payment settled via a US bank transfer?" for a charge-like or
payment-intent identifier.

The service implements:
1. Identifier resolution: pi_xxx is used as-is, py_xxx/ch_xxx is looked
   up and mapped to its owning PaymentIntent
2. Latest charge retrieval: the PaymentIntent's latest_charge is looked
   up in the embedded charge list, with a direct fetch as fallback
3. Classification: the charge's payment_method_details.type must be
   exactly 'us_bank_account'

Every failure (unknown prefix, missing references, Stripe errors,
malformed payloads) yields False. Callers always receive a bool; details
only go to the log.

Usage:
    from payments.services import BankTransferClassifier

    classifier = BankTransferClassifier(StripeAdapter(api_key), verbose=True)

    if await classifier.is_us_bank_transfer("py_123"):
        hold_fulfilment()

    customers = await classifier.find_customers_by_email("a@b.com")
    if customers is None:
        print("Lookup failed")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from payments.adapters import StripeAdapter
from payments.types import (
    PAYMENT_INTENT_PREFIX,
    Charge,
    CheckoutSession,
    Customer,
    PaymentIntent,
    StripeEvent,
)

if TYPE_CHECKING:
    from payments.config import StripeSettings
    from payments.protocols import PaymentGateway


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# ID prefixes of charge records (py_ is used for ACH / bank debits)
CHARGE_PREFIXES = ("py_", "ch_")


def build_email_query(email: str) -> str:
    """
    Build a Stripe search query matching an exact email address.

    Quotes and backslashes inside the address are escaped.

    Example:
        build_email_query("a@b.com")  # "email:'a@b.com'"
    """
    escaped = email.replace("\\", "\\\\").replace("'", "\\'")
    return f"email:'{escaped}'"


class BankTransferClassifier:
    """
    Classifies payments as US bank transfers.

    Holds no state besides the injected gateway, so one instance can
    serve concurrent calls.

    Usage:
        classifier = BankTransferClassifier.from_settings(settings)
        is_ach = await classifier.is_us_bank_transfer("pi_123")
    """

    def __init__(self, gateway: PaymentGateway, *, verbose: bool = False):
        """
        Initialize the classifier.

        Args:
            gateway: Lookup backend (StripeAdapter or a test double)
            verbose: Log each resolution step at INFO instead of DEBUG
        """
        self._gateway = gateway
        self._step_level = logging.INFO if verbose else logging.DEBUG

    @classmethod
    def from_settings(cls, settings: StripeSettings) -> BankTransferClassifier:
        """Build a classifier backed by a StripeAdapter."""
        return cls(
            StripeAdapter.from_settings(settings),
            verbose=settings.debug_logging,
        )

    def _log_step(self, message: str, log_context: dict[str, Any]) -> None:
        logger.log(self._step_level, message, extra=log_context)

    # =========================================================================
    # Classification
    # =========================================================================

    async def is_us_bank_transfer(self, identifier: str) -> bool:
        """
        Check whether a charge or payment intent settled via US bank transfer.

        Args:
            identifier: PaymentIntent ID (pi_xxx) or Charge ID (py_xxx, ch_xxx)

        Returns:
            True if the latest charge's payment method is 'us_bank_account';
            False otherwise, including when anything could not be looked up
        """
        log_context = {
            "operation": "is_us_bank_transfer",
            "identifier": identifier,
        }
        self._log_step("Checking identifier for US bank transfer", log_context)

        try:
            payment_intent_id = await self._resolve_payment_intent_id(identifier)
            if payment_intent_id is None:
                self._log_step("Unable to derive payment intent id", log_context)
                return False

            log_context["payment_intent_id"] = payment_intent_id
            self._log_step("Checking payment intent", log_context)

            charge = await self._latest_charge(payment_intent_id, log_context)
        except Exception as e:
            logger.warning(
                "Bank transfer check failed",
                extra={
                    **log_context,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return False

        if charge is None:
            self._log_step("No charge with payment method details", log_context)
            return False

        return charge.is_us_bank_account

    async def _resolve_payment_intent_id(self, identifier: str) -> str | None:
        if not isinstance(identifier, str) or not identifier:
            return None

        if identifier.startswith(PAYMENT_INTENT_PREFIX):
            return identifier

        if identifier.startswith(CHARGE_PREFIXES):
            charge = await self._gateway.retrieve_charge(identifier)
            return charge.payment_intent

        return None

    async def _latest_charge(
        self,
        payment_intent_id: str,
        log_context: dict[str, Any],
    ) -> Charge | None:
        payment_intent = await self._gateway.retrieve_payment_intent(payment_intent_id)

        if payment_intent.charges is None and not payment_intent.latest_charge:
            return None

        charge = payment_intent.find_charge(payment_intent.latest_charge)
        if charge is None and payment_intent.latest_charge:
            # Newer API versions do not embed charges on the PaymentIntent
            self._log_step(
                "Latest charge not embedded, fetching it directly",
                {**log_context, "latest_charge": payment_intent.latest_charge},
            )
            charge = await self._gateway.retrieve_charge(payment_intent.latest_charge)

        if charge is None or charge.payment_method_details is None:
            return None
        return charge

    @staticmethod
    def is_payment_intent_us_bank_transfer(
        payment_intent: PaymentIntent | Mapping[str, Any],
    ) -> bool:
        """
        Check an already-fetched PaymentIntent without any network access.

        The intent must carry its charges embedded; when the latest charge
        is not among them the answer is False.

        Args:
            payment_intent: PaymentIntent, or a raw Stripe payment_intent payload

        Returns:
            True if the embedded latest charge is a US bank transfer
        """
        try:
            if not isinstance(payment_intent, PaymentIntent):
                payment_intent = PaymentIntent.from_stripe(payment_intent)

            if not payment_intent.id.startswith(PAYMENT_INTENT_PREFIX):
                return False
            if payment_intent.charges is None:
                return False

            logger.debug(
                "Checking embedded charges for US bank transfer",
                extra={
                    "operation": "is_payment_intent_us_bank_transfer",
                    "payment_intent_id": payment_intent.id,
                },
            )
            charge = payment_intent.find_charge(payment_intent.latest_charge)
        except Exception as e:
            logger.warning(
                "Embedded bank transfer check failed",
                extra={
                    "operation": "is_payment_intent_us_bank_transfer",
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return False

        return charge is not None and charge.is_us_bank_account

    async def is_event_us_bank_transfer(
        self,
        event: StripeEvent | Mapping[str, Any],
    ) -> bool:
        """
        Check the payment behind a webhook event.

        payment_intent.* events are checked by the intent's ID and
        checkout.session.* events by the session's payment_intent.
        Other events (customer.*) are never bank transfers.

        Args:
            event: StripeEvent, or a raw Stripe event payload

        Returns:
            True if the event's payment settled via US bank transfer
        """
        try:
            if not isinstance(event, StripeEvent):
                event = StripeEvent.from_stripe(event)
        except Exception as e:
            logger.warning(
                "Could not parse Stripe event",
                extra={
                    "operation": "is_event_us_bank_transfer",
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return False

        obj = event.object
        if isinstance(obj, PaymentIntent):
            return await self.is_us_bank_transfer(obj.id)
        if isinstance(obj, CheckoutSession) and obj.payment_intent:
            return await self.is_us_bank_transfer(obj.payment_intent)

        self._log_step(
            "Event carries no payment to check",
            {
                "operation": "is_event_us_bank_transfer",
                "event_id": event.id,
                "event_type": event.type,
            },
        )
        return False

    # =========================================================================
    # Customer Lookup
    # =========================================================================

    async def find_customers_by_email(self, email: str) -> list[Customer] | None:
        """
        Find customers whose email matches exactly.

        Only the first page of search results is returned.

        Args:
            email: Email address to search for

        Returns:
            Matching customers (possibly empty), or None if the search failed
        """
        log_context = {
            "operation": "find_customers_by_email",
            "email": email,
        }
        self._log_step("Searching customers by email", log_context)

        try:
            customers = await self._gateway.search_customers(build_email_query(email))
        except Exception as e:
            logger.warning(
                "Customer search failed",
                extra={
                    **log_context,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return None

        self._log_step(
            "Customer search completed",
            {**log_context, "count": len(customers)},
        )
        return customers
