"""
Configuration objects and helpers for the CloudPayments client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import build_environment

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_LOCALE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "Credentials",
    "load_client_config",
]

DEFAULT_API_URL = "https://api.cloudpayments.ru"
DEFAULT_LOCALE = "en-US"
DEFAULT_TIMEOUT_SECONDS = 20

_PARAMETER_TO_ENV_KEY = {
    "public_key": "CLOUDPAYMENTS_PUBLIC_KEY",
    "private_key": "CLOUDPAYMENTS_PRIVATE_KEY",
    "api_url": "CLOUDPAYMENTS_API_URL",
    "locale": "CLOUDPAYMENTS_LOCALE",
    "timeout_seconds": "CLOUDPAYMENTS_TIMEOUT_SECONDS",
}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    public_key: Optional[str] = None
    private_key: Optional[str] = None
    api_url: Optional[str] = None
    locale: Optional[str] = None
    timeout_seconds: Optional[int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = str(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:  # pragma: no cover - keys are fixed by the callers below
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = str(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    raw = values.get(key)
    if raw is None:
        raise ConfigError(f"{key} must be provided")
    value = raw.strip()
    if not value:
        raise ConfigError(f"{key} must not be empty")
    return value


def _normalize_url(raw_url: str) -> str:
    url = raw_url.strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"CLOUDPAYMENTS_API_URL is not a valid http(s) URL: '{raw_url}'")
    return url


def _parse_timeout(raw_timeout: str) -> int:
    try:
        timeout = int(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"CLOUDPAYMENTS_TIMEOUT_SECONDS must be an integer, got '{raw_timeout}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("CLOUDPAYMENTS_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class Credentials:
    """Public/private key pair used for HTTP Basic authentication."""

    public_key: str
    private_key: str = field(repr=False)

    def as_auth(self) -> tuple[str, str]:
        return self.public_key, self.private_key


@dataclass(frozen=True)
class ClientConfig:
    credentials: Credentials
    api_url: str = DEFAULT_API_URL
    locale: str = DEFAULT_LOCALE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    def endpoint_url(self, endpoint: str) -> str:
        return self.api_url + endpoint

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        credentials = Credentials(
            public_key=_require(values, "CLOUDPAYMENTS_PUBLIC_KEY"),
            private_key=_require(values, "CLOUDPAYMENTS_PRIVATE_KEY"),
        )
        api_url = _normalize_url(values.get("CLOUDPAYMENTS_API_URL", DEFAULT_API_URL))

        locale = values.get("CLOUDPAYMENTS_LOCALE", DEFAULT_LOCALE).strip()
        if not locale:
            raise ConfigError("CLOUDPAYMENTS_LOCALE must not be empty")

        timeout_seconds = _parse_timeout(
            values.get("CLOUDPAYMENTS_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        )

        return cls(
            credentials=credentials,
            api_url=api_url,
            locale=locale,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        api_url: Optional[str] = None,
        locale: Optional[str] = None,
        timeout_seconds: Optional[int | str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "public_key": public_key,
                "private_key": private_key,
                "api_url": api_url,
                "locale": locale,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    public_key: Optional[str] = None,
    private_key: Optional[str] = None,
    api_url: Optional[str] = None,
    locale: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided through environment variables, a
    ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
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
