from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from cloudpayments import ClientConfig, CloudPaymentsClient, Credentials


class RecordingTransport:
    """Returns canned responses and records every call made through it."""

    def __init__(self, response: Optional[Dict[str, Any]] = None) -> None:
        self.response = response if response is not None else {"Success": True}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.logger = logging.getLogger("cloudpayments.tests")

    def execute(self, endpoint: str, fields: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        self.calls.append((endpoint, dict(fields or {})))
        return self.response

    @property
    def last_call(self) -> Tuple[str, Dict[str, Any]]:
        return self.calls[-1]


class FakeResponse:
    def __init__(self, payload: Any = None, *, text: Optional[str] = None, status_code: int = 200) -> None:
        self._payload = payload
        self.text = text if text is not None else repr(payload)
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response: Any = None) -> None:
        self.response = response
        self.requests: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        credentials=Credentials(public_key="pk_test", private_key="secret"),
        api_url="https://api.example.test",
    )


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def client(config: ClientConfig, transport: RecordingTransport) -> CloudPaymentsClient:
    return CloudPaymentsClient(config, transport=transport)
