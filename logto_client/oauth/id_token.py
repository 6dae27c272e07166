"""ID token decoding and verification.

Signature checks use PyJWT against the provider's JWKS, which the client
fetches through its requester and memoizes.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from ..constants import CLOCK_TOLERANCE, SUPPORTED_ID_TOKEN_ALGORITHMS
from ..utils.errors import ErrorCode, LogtoError
from .requester import Requester

logger = logging.getLogger(__name__)


class IdTokenClaims(BaseModel):
    """Claims carried by a Logto ID token. Unknown claims are kept as extras."""

    model_config = ConfigDict(extra="allow")

    iss: str
    sub: str
    aud: str | list[str]
    exp: int
    iat: int
    at_hash: str | None = None
    name: str | None = None
    username: str | None = None
    picture: str | None = None
    email: str | None = None
    email_verified: bool | None = None
    phone_number: str | None = None
    phone_number_verified: bool | None = None
    roles: list[str] | None = None
    organizations: list[str] | None = None


IdTokenVerifier = Callable[[str, str, str, jwt.PyJWKSet], Awaitable[dict[str, Any]]]


async def fetch_jwks(jwks_uri: str, requester: Requester) -> jwt.PyJWKSet:
    """Fetch the JSON Web Key Set used to sign ID tokens."""
    logger.debug(f"Fetching JWKS from: {jwks_uri}")
    data = await requester(jwks_uri)

    try:
        return jwt.PyJWKSet.from_dict(data)
    except jwt.PyJWTError as e:
        raise LogtoError(ErrorCode.UNEXPECTED_RESPONSE_ERROR, cause=e, message=f"Invalid JWKS: {e}") from e


def _select_key(jwks: jwt.PyJWKSet, kid: str | None) -> jwt.PyJWK:
    if kid is None:
        if len(jwks.keys) == 1:
            return jwks.keys[0]
        raise LogtoError(ErrorCode.ID_TOKEN_INVALID_TOKEN, message="ID token header has no key id")

    try:
        return jwks[kid]
    except KeyError as e:
        raise LogtoError(
            ErrorCode.ID_TOKEN_INVALID_TOKEN,
            cause=e,
            message=f"No signing key found for key id {kid}",
        ) from e


async def verify_id_token(
    id_token: str,
    client_id: str,
    issuer: str,
    jwks: jwt.PyJWKSet,
) -> dict[str, Any]:
    """Verify signature, issuer, audience, expiry and issued-at of an ID token.

    Args:
        id_token: Encoded ID token
        client_id: Expected audience
        issuer: Expected issuer
        jwks: Signing keys of the issuer

    Returns:
        Verified claims

    Raises:
        LogtoError: ``id_token.invalid_token`` on signature/claim failure,
            ``id_token.invalid_iat`` when iat is outside the clock tolerance
    """
    try:
        header = jwt.get_unverified_header(id_token)
    except jwt.PyJWTError as e:
        raise LogtoError(ErrorCode.ID_TOKEN_INVALID_TOKEN, cause=e) from e

    algorithm = header.get("alg")
    if algorithm not in SUPPORTED_ID_TOKEN_ALGORITHMS:
        raise LogtoError(
            ErrorCode.ID_TOKEN_INVALID_TOKEN,
            message=f"Unsupported ID token algorithm: {algorithm}",
        )

    signing_key = _select_key(jwks, header.get("kid"))

    try:
        claims = jwt.decode(
            id_token,
            signing_key.key,
            algorithms=[algorithm],
            audience=client_id,
            issuer=issuer,
            leeway=CLOCK_TOLERANCE,
            options={"require": ["iss", "sub", "aud", "exp", "iat"]},
        )
    except jwt.PyJWTError as e:
        raise LogtoError(ErrorCode.ID_TOKEN_INVALID_TOKEN, cause=e, message=f"Invalid token: {e}") from e

    if abs(claims["iat"] - time.time()) > CLOCK_TOLERANCE:
        raise LogtoError(ErrorCode.ID_TOKEN_INVALID_IAT)

    return claims


def decode_id_token(id_token: str) -> IdTokenClaims:
    """Decode ID token claims without verifying the signature."""
    try:
        payload = jwt.decode(id_token, options={"verify_signature": False})
        return IdTokenClaims.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as e:
        raise LogtoError(ErrorCode.ID_TOKEN_INVALID_TOKEN, cause=e) from e
