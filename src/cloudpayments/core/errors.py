"""
Exceptions raised by the CloudPayments client.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = [
    "CloudPaymentsError",
    "PaymentDeclinedError",
    "RequestError",
]


def _model(response: Mapping[str, Any]) -> Mapping[str, Any]:
    model = response.get("Model")
    return model if isinstance(model, Mapping) else {}


class CloudPaymentsError(Exception):
    """Base class for failures reported by the API; keeps the decoded response."""

    def __init__(self, response: Optional[Mapping[str, Any]] = None) -> None:
        self.response: Mapping[str, Any] = dict(response or {})
        self.message: Optional[str] = self.response.get("Message") or None
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.message:
            return self.message
        if not self.response:
            return "Empty response from CloudPayments API"
        return f"CloudPayments API request failed: {self.response}"


class RequestError(CloudPaymentsError):
    """The call failed without a payment decline (validation, auth, empty response)."""


class PaymentDeclinedError(CloudPaymentsError):
    """The payment was declined with a non-zero reason code."""

    def __init__(
        self,
        response: Optional[Mapping[str, Any]] = None,
        *,
        reason_code: Optional[int] = None,
    ) -> None:
        model = _model(response or {})
        if reason_code is None and model.get("ReasonCode") is not None:
            reason_code = int(model["ReasonCode"])
        self.reason_code = reason_code
        self.card_holder_message: Optional[str] = model.get("CardHolderMessage")
        super().__init__(response)

    def _describe(self) -> str:
        text = f"Payment declined with reason code {self.reason_code}"
        if self.card_holder_message:
            text += f": {self.card_holder_message}"
        return text
