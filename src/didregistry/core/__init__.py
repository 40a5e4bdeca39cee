"""Core infrastructure: configuration, exceptions and logging."""

from .config import CoreSettings, clear_config_cache, get_config
from .exceptions import (
    AlreadyExistsError,
    ConfigException,
    InvalidClaimError,
    InvalidDidError,
    InvalidUserError,
    NotAuthorizedError,
    NotFoundError,
    RegistryException,
    ValidationException,
)
from .logging import configure_logging, current_transaction, transaction_context

__all__ = [
    "AlreadyExistsError",
    "ConfigException",
    "CoreSettings",
    "InvalidClaimError",
    "InvalidDidError",
    "InvalidUserError",
    "NotAuthorizedError",
    "NotFoundError",
    "RegistryException",
    "ValidationException",
    "clear_config_cache",
    "configure_logging",
    "get_config",
    "current_transaction",
    "transaction_context",
]
