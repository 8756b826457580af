"""
Command-line interface for exercising the CloudPayments API.
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Sequence, Tuple

import requests

from .api import create_client
from .core.client import CloudPaymentsClient
from .core.config import ConfigError, load_client_config
from .core.errors import CloudPaymentsError, PaymentDeclinedError
from .core.webhooks import verify_signature


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Amount must be a decimal number, got '{value}'") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"Amount must be a finite number, got '{value}'")
    return amount


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudpayments",
        description="Call a single CloudPayments API operation",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing CLOUDPAYMENTS_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("test", help="Check credentials against /test")

    find = commands.add_parser("find", help="Look up a payment by invoice id")
    find.add_argument("invoice_id")

    void = commands.add_parser("void", help="Void an authorized payment")
    void.add_argument("transaction_id")

    confirm = commands.add_parser("confirm", help="Confirm a two-step payment")
    confirm.add_argument("transaction_id")
    confirm.add_argument("amount", type=_amount)

    refund = commands.add_parser("refund", help="Refund a payment")
    refund.add_argument("transaction_id")
    refund.add_argument("amount", type=_amount)

    verify = commands.add_parser(
        "verify-signature",
        help="Check a saved notification body against its Content-HMAC value",
    )
    verify.add_argument("--file", required=True, help="File holding the raw request body")
    verify.add_argument("--signature", required=True, help="Value of the Content-HMAC header")
    return parser


def _run_command(client: CloudPaymentsClient, args: argparse.Namespace) -> int:
    if args.command == "test":
        client.test()
        logging.info("Credentials accepted by %s", client.url)
    elif args.command == "find":
        transaction = client.find_payment(args.invoice_id)
        logging.info(
            "Transaction %s: %s %s %s",
            transaction.transaction_id,
            transaction.amount,
            transaction.currency,
            transaction.status,
        )
    elif args.command == "void":
        client.void_payment(args.transaction_id)
        logging.info("Transaction %s voided", args.transaction_id)
    elif args.command == "confirm":
        client.confirm_payment(args.transaction_id, args.amount)
        logging.info("Transaction %s confirmed for %s", args.transaction_id, args.amount)
    elif args.command == "refund":
        client.refund_payment(args.transaction_id, args.amount)
        logging.info("Transaction %s refunded for %s", args.transaction_id, args.amount)
    return 0


def _verify_file(client: CloudPaymentsClient, path: str, signature: str) -> int:
    body = Path(path).read_bytes()
    if verify_signature(body, client.config.credentials.private_key, signature):
        logging.info("Signature is valid")
        return 0
    logging.error("Signature does not match %s", path)
    return 1


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config, session=requests.Session())

    if args.command == "verify-signature":
        return _verify_file(client, args.file, args.signature)

    try:
        return _run_command(client, args)
    except PaymentDeclinedError as exc:
        logging.error("Payment declined (reason code %s): %s", exc.reason_code, exc.response)
        return 1
    except CloudPaymentsError as exc:
        logging.error("Request failed: %s", exc)
        return 1


def main() -> None:
    sys.exit(run_cli())
