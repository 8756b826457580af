"""
Core primitives of the CloudPayments client.
"""

from .classifier import (
    classify_charge,
    classify_lookup,
    classify_post3ds,
    classify_status,
)
from .client import CloudPaymentsClient
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    Credentials,
    load_client_config,
)
from .environment import ClientEnvironment, build_environment, load_env_file
from .errors import CloudPaymentsError, PaymentDeclinedError, RequestError
from .models import (
    ErrorKind,
    Money,
    OperationError,
    Outcome,
    PendingChallenge,
    TransactionResult,
)
from .transport import Transport
from .webhooks import compute_signature, verify_notification, verify_signature

__all__ = [
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "CloudPaymentsClient",
    "CloudPaymentsError",
    "ConfigError",
    "Credentials",
    "ErrorKind",
    "Money",
    "OperationError",
    "Outcome",
    "PaymentDeclinedError",
    "PendingChallenge",
    "RequestError",
    "TransactionResult",
    "Transport",
    "build_environment",
    "classify_charge",
    "classify_lookup",
    "classify_post3ds",
    "classify_status",
    "compute_signature",
    "load_client_config",
    "load_env_file",
    "verify_notification",
    "verify_signature",
]
