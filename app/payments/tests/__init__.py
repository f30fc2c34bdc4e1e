"""
Tests for the payments package.

This package contains test modules for:
- test_types.py: Stripe payload parsing
- test_config.py: Settings loading and logging configuration
- test_cli.py: check-bank-transfer command

Usage:
    pytest app/payments/tests/
"""
