"""OAuth 2.0 / OpenID Connect protocol helpers.

This package provides:
- PKCE code verifier, challenge and state generation (RFC 7636)
- OpenID Connect discovery
- Authorization, callback and end-session URL handling
- Token endpoint grants, revocation and userinfo
- ID token decoding and verification
"""

from .id_token import IdTokenClaims, IdTokenVerifier, decode_id_token, fetch_jwks, verify_id_token
from .oidc_config import OidcConfig, fetch_oidc_config, get_discovery_endpoint
from .pkce import generate_code_challenge, generate_code_verifier, generate_pkce_pair, generate_state
from .requester import Requester, create_requester
from .sign_in import (
    generate_sign_in_uri,
    generate_sign_out_uri,
    origin_and_path,
    verify_and_parse_code_from_callback_uri,
)
from .tokens import (
    CodeTokenResponse,
    RefreshTokenResponse,
    fetch_token_by_authorization_code,
    fetch_token_by_refresh_token,
    fetch_user_info,
    revoke,
)

__all__ = [
    # PKCE
    "generate_code_challenge",
    "generate_code_verifier",
    "generate_pkce_pair",
    "generate_state",
    # Transport
    "Requester",
    "create_requester",
    # Discovery
    "OidcConfig",
    "fetch_oidc_config",
    "get_discovery_endpoint",
    # URLs
    "generate_sign_in_uri",
    "generate_sign_out_uri",
    "origin_and_path",
    "verify_and_parse_code_from_callback_uri",
    # Tokens
    "CodeTokenResponse",
    "RefreshTokenResponse",
    "fetch_token_by_authorization_code",
    "fetch_token_by_refresh_token",
    "fetch_user_info",
    "revoke",
    # ID token
    "IdTokenClaims",
    "IdTokenVerifier",
    "decode_id_token",
    "fetch_jwks",
    "verify_id_token",
]
