"""Utility modules for the Logto client."""

from .errors import (
    CallbackVerificationError,
    ConfigurationError,
    ErrorCode,
    LogtoClientError,
    LogtoError,
    LogtoRequestError,
    OidcError,
)
from .logging_config import setup_logging
from .once import AsyncOnce

__all__ = [
    "AsyncOnce",
    "CallbackVerificationError",
    "ConfigurationError",
    "ErrorCode",
    "LogtoClientError",
    "LogtoError",
    "LogtoRequestError",
    "OidcError",
    "setup_logging",
]
