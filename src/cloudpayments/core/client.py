"""
Operation facade for the CloudPayments API.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Protocol, TypeVar, Union

import requests

from .classifier import (
    classify_charge,
    classify_lookup,
    classify_post3ds,
    classify_status,
)
from .config import ClientConfig, Credentials
from .models import Money, OperationError, PendingChallenge, TransactionResult
from .transport import Transport
from .webhooks import verify_notification

__all__ = [
    "CloudPaymentsClient",
    "ResponseTransport",
]

Amount = Union[Money, Decimal, str, float, int]

T = TypeVar("T")


class ResponseTransport(Protocol):
    logger: logging.Logger

    def execute(
        self, endpoint: str, fields: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        ...


def _merge(defaults: Mapping[str, Any], params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    merged = dict(defaults)
    if params:
        merged.update(params)
    return merged


def _amount(value: Amount) -> str:
    """Format numbers as decimals; anything unreadable is sent as given."""
    if isinstance(value, Money):
        return str(value.amount)
    if isinstance(value, Decimal):
        return str(value)
    try:
        return str(Decimal(str(value)))
    except InvalidOperation:
        return str(value)


def _raise_or_return(outcome: Union[T, OperationError]) -> T:
    if isinstance(outcome, OperationError):
        raise outcome.to_exception()
    return outcome


class CloudPaymentsClient:
    """
    One method per API operation.

    Charges resolve to a :class:`TransactionResult` or, when the issuer asks for
    3-D-Secure, a :class:`PendingChallenge`. Failures raise
    :class:`~cloudpayments.core.errors.RequestError` or
    :class:`~cloudpayments.core.errors.PaymentDeclinedError`.

    ``with_locale``, ``with_url`` and ``with_credentials`` return a new client
    on a default :class:`Transport`; a custom ``transport`` is not carried over.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
        transport: Optional[ResponseTransport] = None,
    ) -> None:
        self.config = config
        self.transport = transport or Transport(config, session=session, logger=logger)

    @property
    def logger(self) -> logging.Logger:
        """Logger used for request/response traces; attach handlers to store them."""
        return self.transport.logger

    @property
    def url(self) -> str:
        return self.config.api_url

    @property
    def locale(self) -> str:
        return self.config.locale

    @property
    def public_key(self) -> str:
        return self.config.credentials.public_key

    def _derive(self, config: ClientConfig) -> "CloudPaymentsClient":
        """
        Build a client for ``config`` on a default :class:`Transport`.

        The session and logger are reused. A custom ``transport`` passed to
        the constructor is not carried over, since it was bound to the old
        configuration.
        """
        session = getattr(self.transport, "session", None)
        return CloudPaymentsClient(config, session=session, logger=self.logger)

    def with_locale(self, locale: str) -> "CloudPaymentsClient":
        return self._derive(replace(self.config, locale=locale))

    def with_url(self, url: str) -> "CloudPaymentsClient":
        return self._derive(replace(self.config, api_url=url.rstrip("/")))

    def with_credentials(self, public_key: str, private_key: str) -> "CloudPaymentsClient":
        credentials = Credentials(public_key=public_key, private_key=private_key)
        return self._derive(replace(self.config, credentials=credentials))

    def test(self) -> None:
        _raise_or_return(classify_status(self.transport.execute("/test")))

    def charge_card(
        self,
        amount: Amount,
        currency: str,
        ip_address: str,
        card_holder_name: str,
        cryptogram: str,
        params: Optional[Mapping[str, Any]] = None,
        require_confirmation: bool = False,
    ) -> Union[TransactionResult, PendingChallenge]:
        """
        Charge a card cryptogram, or only authorize it when
        ``require_confirmation`` is set.
        """
        endpoint = "/payments/cards/auth" if require_confirmation else "/payments/cards/charge"
        defaults = {
            "Amount": _amount(amount),
            "Currency": currency,
            "IpAddress": ip_address,
            "Name": card_holder_name,
            "CardCryptogramPacket": cryptogram,
        }
        response = self.transport.execute(endpoint, _merge(defaults, params))
        return _raise_or_return(classify_charge(response))

    def charge_token(
        self,
        amount: Amount,
        currency: str,
        account_id: str,
        token: str,
        params: Optional[Mapping[str, Any]] = None,
        require_confirmation: bool = False,
    ) -> Union[TransactionResult, PendingChallenge]:
        """Charge (or authorize) a previously saved card token."""
        endpoint = "/payments/tokens/auth" if require_confirmation else "/payments/tokens/charge"
        defaults = {
            "Amount": _amount(amount),
            "Currency": currency,
            "AccountId": account_id,
            "Token": token,
        }
        response = self.transport.execute(endpoint, _merge(defaults, params))
        return _raise_or_return(classify_charge(response))

    def confirm_3ds(self, transaction_id: int | str, pa_res: str) -> TransactionResult:
        """Submit the ACS response (``PaRes``) that completes a 3-D-Secure challenge."""
        response = self.transport.execute(
            "/payments/cards/post3ds",
            {"TransactionId": transaction_id, "PaRes": pa_res},
        )
        return _raise_or_return(classify_post3ds(response))

    def confirm_payment(self, transaction_id: int | str, amount: Amount) -> None:
        response = self.transport.execute(
            "/payments/confirm",
            {"TransactionId": transaction_id, "Amount": _amount(amount)},
        )
        _raise_or_return(classify_status(response))

    def void_payment(self, transaction_id: int | str) -> None:
        response = self.transport.execute("/payments/void", {"TransactionId": transaction_id})
        _raise_or_return(classify_status(response))

    def refund_payment(self, transaction_id: int | str, amount: Amount) -> None:
        response = self.transport.execute(
            "/payments/refund",
            {"TransactionId": transaction_id, "Amount": _amount(amount)},
        )
        _raise_or_return(classify_status(response))

    def find_payment(self, invoice_id: str) -> TransactionResult:
        response = self.transport.execute("/payments/find", {"InvoiceId": invoice_id})
        return _raise_or_return(classify_lookup(response))

    def verify_notification(
        self,
        method: str,
        headers: Mapping[str, str],
        body: bytes | str = b"",
        query_string: str = "",
    ) -> bool:
        """Verify a webhook notification with this client's private key."""
        return verify_notification(
            method,
            self.config.credentials.private_key,
            headers,
            body=body,
            query_string=query_string,
        )
