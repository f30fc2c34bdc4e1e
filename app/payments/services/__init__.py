"""
Payment services built on the payment gateway.

This module provides:
- BankTransferClassifier: US bank transfer checks and customer lookup

Usage:
    from payments.services import BankTransferClassifier

    classifier = BankTransferClassifier.from_settings(settings)
    is_ach = await classifier.is_us_bank_transfer("py_123")
"""

from payments.services.bank_transfer import (
    CHARGE_PREFIXES,
    BankTransferClassifier,
    build_email_query,
)

__all__ = [
    "CHARGE_PREFIXES",
    "BankTransferClassifier",
    "build_email_query",
]
