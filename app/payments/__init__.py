"""
Payments package for Stripe lookups.

This package handles:
- US bank transfer classification of charges and payment intents
- Customer lookup by email
- Stripe API access through an injectable gateway

Usage:
    from payments.config import StripeSettings
    from payments.services import BankTransferClassifier

    classifier = BankTransferClassifier.from_settings(StripeSettings.from_env())
    is_ach = await classifier.is_us_bank_transfer("pi_123")
"""
