"""
Pytest fixtures for bank transfer classifier tests.

The gateway is a MagicMock whose lookups are AsyncMocks, so tests can
assert exactly which Stripe calls were made.

Sections:
    - Domain Object Factories
    - Gateway Fixtures
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from payments.services import BankTransferClassifier
from payments.types import Charge, Customer, PaymentIntent, PaymentMethodDetails


# =============================================================================
# Domain Object Factories
# =============================================================================


@pytest.fixture
def charge_factory():
    """Create a Charge."""

    def _create(
        id: str = "py_test1",
        method_type: str | None = "us_bank_account",
        payment_intent: str | None = "pi_test1",
    ) -> Charge:
        details = (
            PaymentMethodDetails(type=method_type) if method_type is not None else None
        )
        return Charge(
            id=id,
            payment_method_details=details,
            payment_intent=payment_intent,
        )

    return _create


@pytest.fixture
def payment_intent_factory():
    """Create a PaymentIntent."""

    def _create(
        id: str = "pi_test1",
        latest_charge: str | None = "py_test1",
        charges: list[Charge] | None = None,
        status: str | None = "processing",
    ) -> PaymentIntent:
        return PaymentIntent(
            id=id,
            latest_charge=latest_charge,
            charges=charges,
            status=status,
        )

    return _create


# =============================================================================
# Gateway Fixtures
# =============================================================================


@pytest.fixture
def gateway():
    """Mock PaymentGateway with async lookups."""
    mock = MagicMock()
    mock.retrieve_charge = AsyncMock()
    mock.retrieve_payment_intent = AsyncMock()
    mock.search_customers = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def classifier(gateway):
    """BankTransferClassifier over the mock gateway."""
    return BankTransferClassifier(gateway)


@pytest.fixture
def customers():
    """Two customers sharing an email."""
    return [
        Customer(id="cus_1", email="a@b.com"),
        Customer(id="cus_2", email="a@b.com", metadata={"plan": "pro"}),
    ]
