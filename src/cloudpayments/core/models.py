"""
Typed results produced from CloudPayments API responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .errors import CloudPaymentsError, PaymentDeclinedError, RequestError

__all__ = [
    "ErrorKind",
    "Money",
    "OperationError",
    "Outcome",
    "PendingChallenge",
    "TransactionResult",
]


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    # str() keeps floats such as 10.1 from expanding to their binary value
    return Decimal(str(value))


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _to_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        # unparsed value stays available in ``raw``
        return None


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        amount = _to_decimal(self.amount)
        if amount is None or amount < 0:
            raise ValueError(f"Amount must be a non-negative number, got {self.amount!r}")
        object.__setattr__(self, "amount", amount)

    def as_fields(self) -> Dict[str, str]:
        return {"Amount": str(self.amount), "Currency": self.currency}


@dataclass(frozen=True)
class TransactionResult:
    """
    A transaction as reported by the ``Model`` of an API response.

    Values are copied from the model with type mapping only; the untouched
    model is kept in ``raw``.
    """

    transaction_id: Optional[int]
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    currency_code: Optional[int] = None
    invoice_id: Optional[str] = None
    account_id: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    status_code: Optional[int] = None
    reason: Optional[str] = None
    reason_code: int = 0
    card_holder_message: Optional[str] = None
    created_at: Optional[datetime] = None
    authorized_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    auth_code: Optional[str] = None
    test_mode: bool = False
    card_first_six: Optional[str] = None
    card_last_four: Optional[str] = None
    card_exp_date: Optional[str] = None
    card_type: Optional[str] = None
    card_holder_name: Optional[str] = None
    token: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def money(self) -> Optional[Money]:
        if self.amount is None or self.currency is None:
            return None
        return Money(self.amount, self.currency)

    @classmethod
    def from_model(cls, model: Mapping[str, Any]) -> "TransactionResult":
        return cls(
            transaction_id=_to_int(model.get("TransactionId")),
            amount=_to_decimal(model.get("Amount")),
            currency=_to_str(model.get("Currency")),
            currency_code=_to_int(model.get("CurrencyCode")),
            invoice_id=_to_str(model.get("InvoiceId")),
            account_id=_to_str(model.get("AccountId")),
            email=model.get("Email"),
            description=model.get("Description"),
            status=model.get("Status"),
            status_code=_to_int(model.get("StatusCode")),
            reason=model.get("Reason"),
            reason_code=_to_int(model.get("ReasonCode")) or 0,
            card_holder_message=model.get("CardHolderMessage"),
            created_at=_to_datetime(model.get("CreatedDateIso")),
            authorized_at=_to_datetime(model.get("AuthDateIso")),
            confirmed_at=_to_datetime(model.get("ConfirmDateIso")),
            auth_code=model.get("AuthCode"),
            test_mode=bool(model.get("TestMode", False)),
            card_first_six=_to_str(model.get("CardFirstSix")),
            card_last_four=_to_str(model.get("CardLastFour")),
            card_exp_date=model.get("CardExpDate"),
            card_type=model.get("CardType"),
            card_holder_name=model.get("Name"),
            token=model.get("Token"),
            raw=dict(model),
        )


@dataclass(frozen=True)
class PendingChallenge:
    """A 3-D-Secure authentication step the card holder has to complete."""

    transaction_id: Optional[int]
    pa_req: Optional[str]
    acs_url: Optional[str]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_model(cls, model: Mapping[str, Any]) -> "PendingChallenge":
        return cls(
            transaction_id=_to_int(model.get("TransactionId")),
            pa_req=model.get("PaReq"),
            acs_url=model.get("AcsUrl"),
            raw=dict(model),
        )


class ErrorKind(str, Enum):
    REQUEST = "request"
    DECLINED = "declined"


@dataclass(frozen=True)
class OperationError:
    """Failed outcome of a call, carrying the decoded response for diagnostics."""

    kind: ErrorKind
    success: bool
    message: Optional[str]
    reason_code: Optional[int]
    response: Mapping[str, Any]

    def to_exception(self) -> CloudPaymentsError:
        if self.kind is ErrorKind.DECLINED:
            return PaymentDeclinedError(self.response, reason_code=self.reason_code)
        return RequestError(self.response)


Outcome = Union[TransactionResult, PendingChallenge, OperationError]
