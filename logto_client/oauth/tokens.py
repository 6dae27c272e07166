"""Token endpoint grants, revocation and userinfo."""

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from ..utils.errors import ErrorCode, LogtoError
from .requester import Requester

logger = logging.getLogger(__name__)


class RefreshTokenResponse(BaseModel):
    """Token endpoint response for the refresh token grant."""

    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str = ""
    expires_in: int
    token_type: str = "Bearer"


class CodeTokenResponse(RefreshTokenResponse):
    """Token endpoint response for the authorization code grant."""

    id_token: str


def _parse_token_response(response_data: Any, model: type[RefreshTokenResponse]) -> Any:
    try:
        return model.model_validate(response_data)
    except ValidationError as e:
        raise LogtoError(
            ErrorCode.UNEXPECTED_RESPONSE_ERROR,
            cause=e,
            message=f"Malformed token response: {e.error_count()} validation error(s)",
        ) from e


async def fetch_token_by_authorization_code(
    *,
    client_id: str,
    token_endpoint: str,
    redirect_uri: str,
    code_verifier: str,
    code: str,
    requester: Requester,
) -> CodeTokenResponse:
    """Exchange an authorization code for tokens.

    Args:
        client_id: OAuth client ID
        token_endpoint: Token endpoint from discovery
        redirect_uri: Redirect URI used in the authorization request
        code_verifier: PKCE code verifier
        code: Authorization code from the callback
        requester: Transport to use

    Returns:
        CodeTokenResponse with access, ID and optional refresh token
    """
    token_data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
        "client_id": client_id,
        "code_verifier": code_verifier,
    }

    response_data = await requester(token_endpoint, method="POST", data=token_data)
    return _parse_token_response(response_data, CodeTokenResponse)


async def fetch_token_by_refresh_token(
    *,
    client_id: str,
    token_endpoint: str,
    refresh_token: str,
    requester: Requester,
    resource: str | None = None,
    scopes: list[str] | None = None,
) -> RefreshTokenResponse:
    """Use a refresh token to obtain a new token set.

    Args:
        client_id: OAuth client ID
        token_endpoint: Token endpoint from discovery
        refresh_token: Current refresh token
        requester: Transport to use
        resource: Optional API resource indicator
        scopes: Optional scope override

    Returns:
        RefreshTokenResponse, possibly carrying a rotated refresh token
    """
    refresh_data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": client_id,
    }

    if resource:
        refresh_data["resource"] = resource

    if scopes:
        refresh_data["scope"] = " ".join(scopes)

    response_data = await requester(token_endpoint, method="POST", data=refresh_data)
    return _parse_token_response(response_data, RefreshTokenResponse)


async def revoke(
    revocation_endpoint: str,
    client_id: str,
    token: str,
    requester: Requester,
) -> None:
    """Revoke a token (RFC 7009)."""
    await requester(
        revocation_endpoint,
        method="POST",
        data={"token": token, "client_id": client_id},
    )


async def fetch_user_info(
    userinfo_endpoint: str,
    access_token: str,
    requester: Requester,
) -> dict[str, Any]:
    """Fetch the userinfo claims for an access token."""
    user_info = await requester(
        userinfo_endpoint,
        headers={"Authorization": f"Bearer {access_token}"},
    )

    if not isinstance(user_info, dict):
        raise LogtoError(
            ErrorCode.UNEXPECTED_RESPONSE_ERROR,
            message="Userinfo response is not a JSON object",
        )

    return user_info
