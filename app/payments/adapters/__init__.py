"""
Payment adapters for external services.

All Stripe API calls go through these adapters to ensure consistent
error handling, timeouts, and observability.

Usage:
    from payments.adapters import StripeAdapter

    adapter = StripeAdapter(api_key="sk_test_...")
    payment_intent = await adapter.retrieve_payment_intent("pi_123")
"""

from payments.adapters.stripe_adapter import StripeAdapter

__all__ = [
    "StripeAdapter",
]
