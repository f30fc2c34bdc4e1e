"""
Command-line check for a single charge or payment intent.

Loads settings from the environment (and an optional .env file),
classifies the identifier and prints True or False.

Usage:
    check-bank-transfer py_123
    TEST_PI=pi_123 check-bank-transfer --env-file .env.development
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from core.exceptions import ConfigurationError
from payments.config import StripeSettings, configure_logging
from payments.services import BankTransferClassifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check-bank-transfer",
        description="Check whether a Stripe charge or payment intent is a US bank transfer.",
    )
    parser.add_argument(
        "identifier",
        nargs="?",
        help="Charge (py_/ch_) or PaymentIntent (pi_) ID; defaults to $TEST_PI",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Env file to read before loading settings (default: .env)",
    )
    return parser


async def run(settings: StripeSettings, identifier: str) -> bool:
    classifier = BankTransferClassifier.from_settings(settings)
    return await classifier.is_us_bank_transfer(identifier)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = StripeSettings.from_env(env_file=args.env_file)
    except ConfigurationError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 2

    configure_logging(settings)

    identifier = args.identifier or os.environ.get("TEST_PI", "")
    if not identifier:
        print("❌ No identifier given and TEST_PI is not set", file=sys.stderr)
        return 2

    print(asyncio.run(run(settings, identifier)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
