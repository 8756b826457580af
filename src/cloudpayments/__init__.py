"""
Client library for the CloudPayments payment-processing API.

The most useful pieces are re-exported here so integrators can
``from cloudpayments import ...`` without navigating the package.
"""

from .api import create_client
from .core import (
    ClientConfig,
    ClientEnvironment,
    ClientParameters,
    CloudPaymentsClient,
    CloudPaymentsError,
    ConfigError,
    Credentials,
    ErrorKind,
    Money,
    OperationError,
    Outcome,
    PaymentDeclinedError,
    PendingChallenge,
    RequestError,
    TransactionResult,
    Transport,
    build_environment,
    compute_signature,
    load_client_config,
    load_env_file,
    verify_notification,
    verify_signature,
)

__all__ = (
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
    "compute_signature",
    "create_client",
    "load_client_config",
    "load_env_file",
    "verify_notification",
    "verify_signature",
)
