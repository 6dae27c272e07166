"""Logto client - OAuth 2.0 / OIDC authorization code flow with PKCE."""

__version__ = "0.1.0"

from .constants import InteractionMode, Prompt, ReservedScope, StorageKey, UserScope
from .core.access_token_cache import AccessToken, AccessTokenCache
from .core.client import ClientAdapter, LogtoClient, Navigate
from .core.config import LogtoConfig, LogtoSettings
from .oauth import IdTokenClaims, OidcConfig, Requester, create_requester
from .storage import FileStorage, MemoryStorage, SignInSession, Storage
from .utils.errors import (
    CallbackVerificationError,
    ConfigurationError,
    ErrorCode,
    LogtoClientError,
    LogtoError,
    LogtoRequestError,
    OidcError,
)
from .utils.logging_config import setup_logging

__all__ = [
    "LogtoClient",
    "ClientAdapter",
    "Navigate",
    "LogtoConfig",
    "LogtoSettings",
    "AccessToken",
    "AccessTokenCache",
    # Protocol
    "IdTokenClaims",
    "OidcConfig",
    "Requester",
    "create_requester",
    # Storage
    "Storage",
    "MemoryStorage",
    "FileStorage",
    "SignInSession",
    # Constants
    "InteractionMode",
    "Prompt",
    "ReservedScope",
    "StorageKey",
    "UserScope",
    # Errors
    "ErrorCode",
    "LogtoError",
    "LogtoClientError",
    "CallbackVerificationError",
    "LogtoRequestError",
    "OidcError",
    "ConfigurationError",
    "setup_logging",
]
