"""
HTTP transport for the CloudPayments API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from .config import ClientConfig

__all__ = [
    "LOGGER_NAME",
    "Transport",
]

LOGGER_NAME = "cloudpayments"


def _decode(response: requests.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class Transport:
    """
    Issues authenticated form POSTs and returns the decoded JSON object.

    Connection failures and unreadable bodies are reported as an empty
    mapping, never as an exception.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def execute(
        self,
        endpoint: str,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = dict(fields or {})
        params["CultureName"] = self.config.locale

        self.logger.debug("Request %s with params: %s", endpoint, urlencode(params))

        try:
            response = self.session.post(
                self.config.endpoint_url(endpoint),
                data=params,
                auth=self.config.credentials.as_auth(),
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            self.logger.error("Request error: %s", exc)
            return {}

        self.logger.debug("Response %s: %s", endpoint, response.text)
        return _decode(response)
