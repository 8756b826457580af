"""
Verification of notifications sent by CloudPayments.

Each notification is signed with HMAC-SHA256 over the raw request body (POST)
or the raw query string (GET), keyed with the merchant's private key, and the
base64 digest is sent in the ``Content-HMAC`` header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Mapping, Optional, Union

__all__ = [
    "SIGNATURE_HEADERS",
    "compute_signature",
    "verify_notification",
    "verify_signature",
]

SIGNATURE_HEADERS = ("Content-HMAC", "X-Content-HMAC")

Data = Union[bytes, str]


def _as_bytes(value: Data) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def compute_signature(data: Data, private_key: str) -> str:
    digest = hmac.new(_as_bytes(private_key), _as_bytes(data), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(data: Data, private_key: str, signature: Optional[Data]) -> bool:
    """Return ``True`` if ``signature`` is the expected HMAC of ``data``."""
    if not signature or not private_key:
        return False
    try:
        expected = compute_signature(data, private_key)
        return hmac.compare_digest(expected.encode("ascii"), _as_bytes(signature).strip())
    except (AttributeError, TypeError, UnicodeError):
        return False


def _find_header(headers: Mapping[str, Data], names: tuple[str, ...]) -> Optional[Data]:
    lowered = {key.lower(): value for key, value in headers.items()}
    for name in names:
        value = lowered.get(name.lower())
        if value:
            return value
    return None


def verify_notification(
    method: str,
    private_key: str,
    headers: Mapping[str, Data],
    body: Data = b"",
    query_string: Data = "",
) -> bool:
    """
    Check that a notification request was signed by CloudPayments.

    Fails closed: a missing signature header, an HTTP method other than GET or
    POST, or a GET request carrying a body all yield ``False``.
    """
    signature = _find_header(headers, SIGNATURE_HEADERS)
    if signature is None:
        return False

    verb = (method or "").upper()
    if verb == "POST":
        data = body
    elif verb == "GET":
        if body:
            return False
        data = query_string
    else:
        return False

    return verify_signature(data, private_key, signature)
