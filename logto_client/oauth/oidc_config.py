"""OpenID Connect discovery.

Fetches the provider metadata published at
``{endpoint}/oidc/.well-known/openid-configuration``.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..constants import DISCOVERY_PATH
from ..utils.errors import ErrorCode, LogtoError
from .requester import Requester

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "authorization_endpoint",
    "token_endpoint",
    "end_session_endpoint",
    "revocation_endpoint",
    "jwks_uri",
    "issuer",
)


@dataclass(frozen=True)
class OidcConfig:
    """OIDC provider metadata."""

    authorization_endpoint: str
    token_endpoint: str
    end_session_endpoint: str
    revocation_endpoint: str
    jwks_uri: str
    issuer: str
    userinfo_endpoint: str | None = None

    @classmethod
    def from_discovery(cls, metadata: dict[str, Any]) -> "OidcConfig":
        """Create from a discovery document.

        Raises:
            LogtoError: If a required endpoint is missing
        """
        missing = [name for name in REQUIRED_FIELDS if not isinstance(metadata.get(name), str)]
        if missing:
            raise LogtoError(
                ErrorCode.UNEXPECTED_RESPONSE_ERROR,
                message=f"Discovery document missing fields: {', '.join(missing)}",
            )

        return cls(
            authorization_endpoint=metadata["authorization_endpoint"],
            token_endpoint=metadata["token_endpoint"],
            end_session_endpoint=metadata["end_session_endpoint"],
            revocation_endpoint=metadata["revocation_endpoint"],
            jwks_uri=metadata["jwks_uri"],
            issuer=metadata["issuer"],
            userinfo_endpoint=metadata.get("userinfo_endpoint"),
        )


def get_discovery_endpoint(endpoint: str) -> str:
    return f"{endpoint.rstrip('/')}{DISCOVERY_PATH}"


async def fetch_oidc_config(discovery_endpoint: str, requester: Requester) -> OidcConfig:
    """Fetch and parse the discovery document.

    Args:
        discovery_endpoint: Full URL of the discovery document
        requester: Transport to use

    Returns:
        OidcConfig with the provider endpoints
    """
    logger.debug(f"Fetching OIDC configuration from: {discovery_endpoint}")
    metadata = await requester(discovery_endpoint)

    if not isinstance(metadata, dict):
        raise LogtoError(
            ErrorCode.UNEXPECTED_RESPONSE_ERROR,
            message="Discovery document is not a JSON object",
        )

    config = OidcConfig.from_discovery(metadata)
    logger.info(f"Discovered OIDC configuration for issuer {config.issuer}")
    logger.debug(f"Authorization endpoint: {config.authorization_endpoint}")
    logger.debug(f"Token endpoint: {config.token_endpoint}")
    return config
