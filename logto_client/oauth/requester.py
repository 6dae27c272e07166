"""HTTP transport used for every call to the Logto server.

The client never talks to httpx directly. It goes through a ``Requester``,
an async callable that sends a request and returns the decoded JSON body,
so tests and runtime adapters can swap the transport.
"""

import base64
import logging
from typing import Any, Protocol

import httpx

from ..utils.errors import ErrorCode, LogtoError, LogtoRequestError, OidcError

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class Requester(Protocol):
    """Async HTTP transport returning the decoded JSON body (or None when empty)."""

    async def __call__(
        self,
        url: str,
        *,
        method: str = "GET",
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...


def _raise_for_response(response: httpx.Response) -> None:
    """Map a non-2xx response to a Logto error.

    Logto answers with ``{code, message}``; the OIDC endpoints answer with
    ``{error, error_description}`` (RFC 6749 section 5.2).
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get("code"), str) and isinstance(body.get("message"), str):
            raise LogtoRequestError(body["code"], body["message"], status_code=response.status_code)
        if isinstance(body.get("error"), str):
            oidc_error = OidcError(body["error"], body.get("error_description"))
            raise LogtoError(
                ErrorCode.UNEXPECTED_RESPONSE_ERROR,
                cause=oidc_error,
                message=f"Server returned {response.status_code}: {oidc_error}",
            ) from oidc_error

    raise LogtoError(
        ErrorCode.UNEXPECTED_RESPONSE_ERROR,
        message=f"Server returned {response.status_code} for {response.request.url}",
    )


def create_requester(
    client: httpx.AsyncClient | None = None,
    *,
    app_id: str | None = None,
    app_secret: str | None = None,
    timeout: float = 10.0,
) -> Requester:
    """Create an httpx-backed requester.

    Args:
        client: Shared AsyncClient to use. A short-lived client is opened per
            request when omitted.
        app_id: Client ID, used together with ``app_secret``
        app_secret: Secret of a confidential client. When set, every request
            carries HTTP Basic client authentication.
        timeout: Per-request timeout in seconds for short-lived clients

    Returns:
        Requester callable
    """
    auth_headers: dict[str, str] = {}
    if app_id and app_secret:
        credentials = base64.b64encode(f"{app_id}:{app_secret}".encode("utf-8")).decode("ascii")
        auth_headers["Authorization"] = f"Basic {credentials}"

    async def send(
        http: httpx.AsyncClient,
        url: str,
        method: str,
        data: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        merged = {**auth_headers, **(headers or {})}
        if data is not None:
            merged = {**FORM_HEADERS, **merged}
        return await http.request(method, url, data=data, headers=merged)

    async def requester(
        url: str,
        *,
        method: str = "GET",
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        logger.debug(f"{method} {url}")
        try:
            if client is not None:
                response = await send(client, url, method, data, headers)
            else:
                async with httpx.AsyncClient(timeout=timeout) as http:
                    response = await send(http, url, method, data, headers)
        except httpx.HTTPError as e:
            raise LogtoError(ErrorCode.REQUESTER_FAILED, cause=e, message=f"Request failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        if not response.is_success:
            _raise_for_response(response)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise LogtoError(ErrorCode.UNEXPECTED_RESPONSE_ERROR, cause=e) from e

    return requester
