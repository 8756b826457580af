"""
Minimal script that charges a card cryptogram through the public API.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from cloudpayments import (
    CloudPaymentsError,
    ConfigError,
    PaymentDeclinedError,
    PendingChallenge,
    create_client,
    load_client_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Charge a card using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing CLOUDPAYMENTS_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--amount", required=True, help="Amount to charge, e.g. 10.50")
    parser.add_argument("--currency", default="RUB", help="ISO currency code (default: RUB)")
    parser.add_argument("--ip-address", required=True, help="Payer's IP address")
    parser.add_argument("--name", required=True, help="Card holder name as printed on the card")
    parser.add_argument(
        "--cryptogram",
        required=True,
        help="Card cryptogram packet produced by the checkout script",
    )
    parser.add_argument("--invoice-id", help="Merchant order number")
    parser.add_argument(
        "--two-step",
        action="store_true",
        help="Only authorize the amount; confirm it later",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    extra = {"InvoiceId": args.invoice_id} if args.invoice_id else None

    try:
        outcome = client.charge_card(
            args.amount,
            args.currency,
            args.ip_address,
            args.name,
            args.cryptogram,
            params=extra,
            require_confirmation=args.two_step,
        )
    except PaymentDeclinedError as exc:
        logging.error("Payment declined with reason code %s", exc.reason_code)
        return 1
    except CloudPaymentsError as exc:
        logging.error("Charge failed: %s", exc)
        return 1

    if isinstance(outcome, PendingChallenge):
        logging.info(
            "3-D-Secure required for transaction %s: post PaReq to %s",
            outcome.transaction_id,
            outcome.acs_url,
        )
        return 0

    logging.info(
        "Transaction %s completed: %s %s",
        outcome.transaction_id,
        outcome.amount,
        outcome.currency,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
