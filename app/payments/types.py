"""
Data types for Stripe lookups.

This module defines read-only dataclasses for the subset of Stripe
objects the bank transfer checks care about. Each type is built from a
Stripe response payload (a plain dict, or a StripeObject converted with
``to_dict()``) via its ``from_stripe`` constructor. Fields not listed
here are ignored.

Types:
    PaymentMethodDetails: Payment method discriminator of a charge
    Charge: A single settlement attempt (ch_xxx / py_xxx)
    PaymentIntent: Payment lifecycle record (pi_xxx)
    Customer: Customer record (cus_xxx)
    CheckoutSession: Checkout session (cs_xxx)
    StripeEvent: Webhook event envelope (evt_xxx)

Usage:
    from payments.types import PaymentIntent

    pi = PaymentIntent.from_stripe(
        {
            "id": "pi_123",
            "latest_charge": "py_1",
            "charges": {"object": "list", "data": [{"id": "py_1", ...}]},
        }
    )
    charge = pi.find_charge(pi.latest_charge)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from payments.exceptions import PaymentValidationError

US_BANK_ACCOUNT = "us_bank_account"

PAYMENT_INTENT_PREFIX = "pi_"


def _require_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise PaymentValidationError(
            f"{kind} payload must be an object",
            details={"received": type(data).__name__},
        )
    return data


def _require_id(data: Mapping[str, Any], kind: str) -> str:
    object_id = data.get("id")
    if not object_id or not isinstance(object_id, str):
        raise PaymentValidationError(
            f"{kind} payload has no id",
            details={"object": data.get("object")},
        )
    return object_id


def _reference(value: Any) -> str | None:
    """Reduce a Stripe reference (id string or expanded object) to its id."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping):
        ref = value.get("id")
        return ref if isinstance(ref, str) and ref else None
    return None


def _metadata(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): str(item) for key, item in value.items()}


@dataclass(frozen=True)
class PaymentMethodDetails:
    """
    Payment method details of a charge.

    Attributes:
        type: Discriminator such as 'card' or 'us_bank_account'
    """

    type: str

    @classmethod
    def from_stripe(cls, data: Any) -> PaymentMethodDetails | None:
        if not isinstance(data, Mapping):
            return None
        method_type = data.get("type")
        if not isinstance(method_type, str):
            return None
        return cls(type=method_type)


@dataclass(frozen=True)
class Charge:
    """
    A single settlement attempt.

    Attributes:
        id: Charge ID (ch_xxx, or py_xxx for bank payments)
        payment_method_details: Payment method used, if reported
        payment_intent: ID of the owning PaymentIntent, if any
    """

    id: str
    payment_method_details: PaymentMethodDetails | None = None
    payment_intent: str | None = None

    @classmethod
    def from_stripe(cls, data: Any) -> Charge:
        data = _require_mapping(data, "Charge")
        return cls(
            id=_require_id(data, "Charge"),
            payment_method_details=PaymentMethodDetails.from_stripe(
                data.get("payment_method_details")
            ),
            payment_intent=_reference(data.get("payment_intent")),
        )

    @property
    def is_us_bank_account(self) -> bool:
        """True iff the payment method type is exactly 'us_bank_account'."""
        details = self.payment_method_details
        return details is not None and details.type == US_BANK_ACCOUNT


@dataclass(frozen=True)
class PaymentIntent:
    """
    A payment lifecycle record which may own several charge attempts.

    Attributes:
        id: PaymentIntent ID (pi_xxx)
        latest_charge: ID of the most recent charge attempt
        charges: Embedded charges, or None when the response carries no list
        status: Current status (processing, succeeded, etc.)
        metadata: Attached metadata
    """

    id: str
    latest_charge: str | None = None
    charges: list[Charge] | None = None
    status: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: Any) -> PaymentIntent:
        data = _require_mapping(data, "PaymentIntent")

        charges: list[Charge] | None = None
        raw_charges = data.get("charges")
        if isinstance(raw_charges, Mapping):
            raw_charges = raw_charges.get("data")
        if isinstance(raw_charges, list):
            charges = [Charge.from_stripe(item) for item in raw_charges]

        return cls(
            id=_require_id(data, "PaymentIntent"),
            latest_charge=_reference(data.get("latest_charge")),
            charges=charges,
            status=data.get("status"),
            metadata=_metadata(data.get("metadata")),
        )

    def find_charge(self, charge_id: str | None) -> Charge | None:
        """Return the embedded charge with the given ID, if present."""
        if not charge_id or not self.charges:
            return None
        for charge in self.charges:
            if charge.id == charge_id:
                return charge
        return None


@dataclass(frozen=True)
class Customer:
    """
    A Stripe customer.

    Attributes:
        id: Customer ID (cus_xxx)
        email: Email address on file
        metadata: Attached metadata
    """

    id: str
    email: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: Any) -> Customer:
        data = _require_mapping(data, "Customer")
        return cls(
            id=_require_id(data, "Customer"),
            email=data.get("email"),
            metadata=_metadata(data.get("metadata")),
        )


@dataclass(frozen=True)
class CheckoutSession:
    """
    A Checkout Session.

    Attributes:
        id: Session ID (cs_xxx)
        payment_intent: ID of the PaymentIntent created by the session
        metadata: Attached metadata
    """

    id: str
    payment_intent: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: Any) -> CheckoutSession:
        data = _require_mapping(data, "CheckoutSession")
        return cls(
            id=_require_id(data, "CheckoutSession"),
            payment_intent=_reference(data.get("payment_intent")),
            metadata=_metadata(data.get("metadata")),
        )


EventObject = Union[PaymentIntent, CheckoutSession, Customer, None]

# Stripe "object" discriminator -> parser
_EVENT_OBJECT_PARSERS = {
    "payment_intent": PaymentIntent.from_stripe,
    "checkout.session": CheckoutSession.from_stripe,
    "customer": Customer.from_stripe,
}


@dataclass(frozen=True)
class StripeEvent:
    """
    A webhook event envelope.

    Attributes:
        id: Event ID (evt_xxx)
        type: Event type, e.g. 'payment_intent.processing'
        object: Parsed data.object, or None for unsupported object kinds
    """

    id: str
    type: str
    object: EventObject = None

    @classmethod
    def from_stripe(cls, data: Any) -> StripeEvent:
        data = _require_mapping(data, "Event")
        event_type = data.get("type")
        if not isinstance(event_type, str):
            raise PaymentValidationError(
                "Event payload has no type",
                details={"id": data.get("id")},
            )

        payload = data.get("data")
        raw_object = payload.get("object") if isinstance(payload, Mapping) else None
        parsed: EventObject = None
        if isinstance(raw_object, Mapping):
            parser = _EVENT_OBJECT_PARSERS.get(raw_object.get("object"))
            if parser is not None:
                parsed = parser(raw_object)

        return cls(id=_require_id(data, "Event"), type=event_type, object=parsed)
