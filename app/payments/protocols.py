"""
Protocol definitions for the payment gateway.

The bank transfer classifier depends on this interface rather than on
the Stripe SDK, so any object with these three coroutines can stand in
for the real adapter (a test double, a cached gateway, etc.).

Available Protocols:
    PaymentGateway: Read-only charge, payment intent and customer lookups

Usage:
    from payments.protocols import PaymentGateway

    async def latest_status(gateway: PaymentGateway, pi_id: str) -> str | None:
        payment_intent = await gateway.retrieve_payment_intent(pi_id)
        return payment_intent.status

Note:
    - Implementations raise on failure; callers decide how to recover
    - @runtime_checkable allows isinstance() checks
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from payments.types import Charge, Customer, PaymentIntent


@runtime_checkable
class PaymentGateway(Protocol):
    """
    Protocol for payment lookups.

    Example:
        class StripeAdapter:
            async def retrieve_charge(self, charge_id): ...
            async def retrieve_payment_intent(self, payment_intent_id): ...
            async def search_customers(self, query): ...
    """

    async def retrieve_charge(self, charge_id: str) -> Charge:
        """
        Fetch a charge by ID.

        Args:
            charge_id: Charge ID (ch_xxx or py_xxx)

        Returns:
            The charge record
        """
        ...

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """
        Fetch a payment intent by ID.

        Args:
            payment_intent_id: PaymentIntent ID (pi_xxx)

        Returns:
            The payment intent record
        """
        ...

    async def search_customers(self, query: str) -> list[Customer]:
        """
        Search customers.

        Args:
            query: Search query string, e.g. "email:'a@b.com'"

        Returns:
            Matching customers from the first result page
        """
        ...
