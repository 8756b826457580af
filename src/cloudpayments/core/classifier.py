"""
Interpretation of decoded CloudPayments responses.

A single call resolves into exactly one outcome. Which fields are consulted,
and in which order, depends on the operation family:

* charge / authorize: success, then message, then reason code, otherwise a
  3-D-Secure challenge is pending;
* 3-D-Secure confirmation: message, then reason code, otherwise the
  transaction is final;
* everything else: the ``Success`` flag decides.

The functions here never perform I/O.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .models import (
    ErrorKind,
    OperationError,
    Outcome,
    PendingChallenge,
    TransactionResult,
)

__all__ = [
    "classify_charge",
    "classify_lookup",
    "classify_post3ds",
    "classify_status",
]


def _model(response: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    model = response.get("Model")
    return model if isinstance(model, Mapping) else None


def _decline_code(model: Optional[Mapping[str, Any]]) -> Optional[int]:
    """Return the reason code when it marks a decline (present and non-zero)."""
    if model is None or model.get("ReasonCode") is None:
        return None
    code = int(model["ReasonCode"])
    return code if code != 0 else None


def _request_error(response: Mapping[str, Any]) -> OperationError:
    return OperationError(
        kind=ErrorKind.REQUEST,
        success=bool(response.get("Success")),
        message=response.get("Message") or None,
        reason_code=None,
        response=response,
    )


def _declined(response: Mapping[str, Any], code: int) -> OperationError:
    return OperationError(
        kind=ErrorKind.DECLINED,
        success=bool(response.get("Success")),
        message=None,
        reason_code=code,
        response=response,
    )


def classify_charge(response: Mapping[str, Any]) -> Outcome:
    """Classify a card/token charge or authorization response."""
    model = _model(response)

    if response.get("Success"):
        if model is None:
            return _request_error(response)
        return TransactionResult.from_model(model)

    if response.get("Message"):
        return _request_error(response)

    code = _decline_code(model)
    if code is not None:
        return _declined(response, code)

    # Nothing to build a challenge from: empty or malformed response.
    if model is None:
        return _request_error(response)
    return PendingChallenge.from_model(model)


def classify_post3ds(
    response: Mapping[str, Any],
) -> Union[TransactionResult, OperationError]:
    """Classify the response to a 3-D-Secure confirmation."""
    if response.get("Message"):
        return _request_error(response)

    model = _model(response)
    code = _decline_code(model)
    if code is not None:
        return _declined(response, code)

    if model is None:
        return _request_error(response)
    return TransactionResult.from_model(model)


def classify_status(response: Mapping[str, Any]) -> Optional[OperationError]:
    """Classify a call that only reports success; ``None`` means it succeeded."""
    if response.get("Success"):
        return None
    return _request_error(response)


def classify_lookup(
    response: Mapping[str, Any],
) -> Union[TransactionResult, OperationError]:
    """Classify a lookup; ``Success`` alone decides, the model is then parsed."""
    error = classify_status(response)
    if error is not None:
        return error

    model = _model(response)
    if model is None:
        return _request_error(response)
    return TransactionResult.from_model(model)
