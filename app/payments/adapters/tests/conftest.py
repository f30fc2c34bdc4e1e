"""
Pytest fixtures for Stripe adapter tests.

This module provides fixtures for testing the Stripe adapter, including
a mock StripeClient, mock API responses, and SDK error instances.

Sections:
    - Mock Stripe Response Fixtures
    - Mock Stripe Error Fixtures
    - Mock Stripe Client Fixtures
    - Stripe SDK Fixtures (real StripeClient over an httpx mock transport)
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import stripe

from payments.adapters import StripeAdapter


# =============================================================================
# Mock Stripe Response Fixtures
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass
class MockStripeList:
    """Mock Stripe list/search response with data attribute."""

    items: list[MockStripeObject]
    has_more: bool = False

    @property
    def data(self) -> list[MockStripeObject]:
        return self.items


@pytest.fixture
def mock_charge():
    """Create a mock Charge response."""

    def _create(
        id: str = "py_test123456",
        method_type: str | None = "us_bank_account",
        payment_intent: str | None = "pi_test123456",
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "charge",
                "payment_intent": payment_intent,
                "payment_method_details": (
                    {"type": method_type} if method_type is not None else None
                ),
            }
        )

    return _create


@pytest.fixture
def mock_payment_intent(mock_charge):
    """Create a mock PaymentIntent response."""

    def _create(
        id: str = "pi_test123456",
        status: str = "processing",
        latest_charge: str | None = "py_test123456",
        charges: list[MockStripeObject] | None = None,
        metadata: dict | None = None,
    ) -> MockStripeObject:
        payload = {
            "id": id,
            "object": "payment_intent",
            "status": status,
            "latest_charge": latest_charge,
            "metadata": metadata or {},
        }
        if charges is not None:
            payload["charges"] = {
                "object": "list",
                "data": [charge.to_dict() for charge in charges],
            }
        return MockStripeObject(payload)

    return _create


@pytest.fixture
def mock_customer():
    """Create a mock Customer response."""

    def _create(
        id: str = "cus_test123456",
        email: str = "a@b.com",
        metadata: dict | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "customer",
                "email": email,
                "metadata": metadata or {},
            }
        )

    return _create


@pytest.fixture
def mock_customer_search(mock_customer):
    """Create a mock Customer search response."""

    def _create(*emails: str) -> MockStripeList:
        customers = [
            mock_customer(id=f"cus_test{i}", email=email)
            for i, email in enumerate(emails)
        ]
        return MockStripeList(items=customers, has_more=False)

    return _create


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError."""

    def _create(
        message: str = "No such charge: 'py_missing'",
        param: str | None = "id",
        code: str = "resource_missing",
    ) -> stripe.InvalidRequestError:
        return stripe.InvalidRequestError(
            message=message,
            param=param,
            code=code,
        )

    return _create


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(
        message="Too many requests hit the API too quickly.",
    )


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(
        message="Could not connect to Stripe.",
    )


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(
        message="Something went wrong on Stripe's end.",
    )


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(
        message="Invalid API Key provided.",
    )


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture
def mock_stripe_client(mock_charge, mock_payment_intent):
    """Mock StripeClient exposing the async v1 services used by the adapter."""
    client = MagicMock()
    client.v1.charges.retrieve_async = AsyncMock(return_value=mock_charge())
    client.v1.payment_intents.retrieve_async = AsyncMock(
        return_value=mock_payment_intent()
    )
    client.v1.customers.search_async = AsyncMock(return_value=MockStripeList(items=[]))
    return client


@pytest.fixture
def adapter(mock_stripe_client):
    """StripeAdapter wired to the mock client."""
    return StripeAdapter("sk_test_123", client=mock_stripe_client)


# =============================================================================
# Stripe SDK Fixtures
# =============================================================================


class FakeStripeApi:
    """
    Canned Stripe HTTP API served through httpx.MockTransport.

    Responses are registered by request path. Unregistered paths answer
    404 with Stripe's resource_missing error body.
    """

    def __init__(self):
        self.routes: dict[str, tuple[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def add(self, path: str, payload: dict[str, Any], status_code: int = 200):
        self.routes[path] = (status_code, payload)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, payload = self.routes.get(
            request.url.path,
            (
                404,
                {
                    "error": {
                        "type": "invalid_request_error",
                        "code": "resource_missing",
                        "message": f"No such object: '{request.url.path}'",
                    }
                },
            ),
        )
        return httpx.Response(status_code, json=payload)

    def build_client(self) -> stripe.StripeClient:
        http_client = stripe.HTTPXClient()
        http_client._client_async = httpx.AsyncClient(
            transport=httpx.MockTransport(self.handle)
        )
        return stripe.StripeClient(
            "sk_test_123",
            http_client=http_client,
            max_network_retries=0,
        )


@pytest.fixture
def stripe_api():
    """Fake Stripe HTTP API with no registered responses."""
    return FakeStripeApi()


@pytest.fixture
def sdk_adapter(stripe_api):
    """StripeAdapter running the real Stripe SDK against the fake API."""
    return StripeAdapter("sk_test_123", client=stripe_api.build_client())
