"""
Public, high-level helpers for building a CloudPayments client.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

from .core.client import CloudPaymentsClient
from .core.config import ClientConfig, ClientParameters, load_client_config

__all__ = [
    "create_client",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    logger: Optional[logging.Logger] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    public_key: Optional[str] = None,
    private_key: Optional[str] = None,
    api_url: Optional[str] = None,
    locale: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
) -> CloudPaymentsClient:
    """
    Construct a :class:`CloudPaymentsClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            public_key,
            private_key,
            api_url,
            locale,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            public_key=public_key,
            private_key=private_key,
            api_url=api_url,
            locale=locale,
            timeout_seconds=timeout_seconds,
        )
    return CloudPaymentsClient(cfg, session=session, logger=logger)
