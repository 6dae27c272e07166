"""Client core: configuration, access token cache and the flow orchestrator."""

from .access_token_cache import AccessToken, AccessTokenCache, build_access_token_key
from .client import ClientAdapter, LogtoClient, Navigate
from .config import LogtoConfig, LogtoSettings, with_reserved_scopes

__all__ = [
    "AccessToken",
    "AccessTokenCache",
    "ClientAdapter",
    "LogtoClient",
    "LogtoConfig",
    "LogtoSettings",
    "Navigate",
    "build_access_token_key",
    "with_reserved_scopes",
]
