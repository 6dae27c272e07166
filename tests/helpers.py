"""Shared constants and test doubles for logto-client tests."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

ENDPOINT = "https://logto.dev"
APP_ID = "foo"
ISSUER = "https://logto.dev/oidc"
REDIRECT_URI = "https://app.example/cb"
KEY_ID = "test-key"

DISCOVERY_URL = f"{ENDPOINT}/oidc/.well-known/openid-configuration"
AUTHORIZATION_ENDPOINT = f"{ENDPOINT}/oidc/auth"
TOKEN_ENDPOINT = f"{ENDPOINT}/oidc/token"
END_SESSION_ENDPOINT = f"{ENDPOINT}/oidc/session/end"
REVOCATION_ENDPOINT = f"{ENDPOINT}/oidc/token/revocation"
JWKS_URI = f"{ENDPOINT}/oidc/jwks"
USERINFO_ENDPOINT = f"{ENDPOINT}/oidc/me"

MOCKED_CODE_VERIFIER = "code_verifier_value"
MOCKED_CODE_CHALLENGE = "code_challenge_value"
MOCKED_STATE = "state_value"


@dataclass
class RecordedCall:
    url: str
    method: str
    data: dict[str, Any] | None
    headers: dict[str, str] | None


@dataclass
class FakeRequester:
    """Requester double routing by URL.

    A route is a JSON value, an exception to raise, or a callable taking the
    form data and returning either of those.
    """

    routes: dict[str, Any] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)

    async def __call__(
        self,
        url: str,
        *,
        method: str = "GET",
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        self.calls.append(RecordedCall(url, method, data, headers))
        # Yield so concurrently scheduled callers interleave as over a network
        await asyncio.sleep(0)

        route = self.routes[url]
        result = route(data) if callable(route) else route
        if isinstance(result, Exception):
            raise result
        return result

    def calls_to(self, url: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.url == url]


