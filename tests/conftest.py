"""Pytest configuration and fixtures for logto-client tests."""

import json
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from helpers import (
    APP_ID,
    AUTHORIZATION_ENDPOINT,
    DISCOVERY_URL,
    END_SESSION_ENDPOINT,
    ENDPOINT,
    ISSUER,
    JWKS_URI,
    KEY_ID,
    MOCKED_CODE_CHALLENGE,
    MOCKED_CODE_VERIFIER,
    MOCKED_STATE,
    REVOCATION_ENDPOINT,
    TOKEN_ENDPOINT,
    USERINFO_ENDPOINT,
    FakeRequester,
)

from logto_client import ClientAdapter, LogtoClient, LogtoConfig, MemoryStorage


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    """RSA key used to sign test ID tokens."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwks_dict(signing_key: rsa.RSAPrivateKey) -> dict[str, Any]:
    """JWKS document publishing the test signing key."""
    key = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(signing_key.public_key()))
    key.update({"kid": KEY_ID, "alg": "RS256", "use": "sig"})
    return {"keys": [key]}


@pytest.fixture
def jwks(jwks_dict: dict[str, Any]) -> jwt.PyJWKSet:
    return jwt.PyJWKSet.from_dict(jwks_dict)


@pytest.fixture
def make_id_token(signing_key: rsa.RSAPrivateKey) -> Callable[..., str]:
    """Factory for signed ID tokens; keyword arguments override claims."""

    def factory(key: Any = None, headers: dict[str, Any] | None = None, **claims: Any) -> str:
        now = int(time.time())
        payload = {
            "iss": ISSUER,
            "sub": "user_id",
            "aud": APP_ID,
            "exp": now + 3600,
            "iat": now,
            "name": "Test User",
        }
        payload.update(claims)
        return jwt.encode(
            payload,
            key or signing_key,
            algorithm="RS256",
            headers=headers if headers is not None else {"kid": KEY_ID},
        )

    return factory


@pytest.fixture
def discovery_document() -> dict[str, str]:
    """Sample OIDC discovery document."""
    return {
        "authorization_endpoint": AUTHORIZATION_ENDPOINT,
        "token_endpoint": TOKEN_ENDPOINT,
        "end_session_endpoint": END_SESSION_ENDPOINT,
        "revocation_endpoint": REVOCATION_ENDPOINT,
        "jwks_uri": JWKS_URI,
        "issuer": ISSUER,
        "userinfo_endpoint": USERINFO_ENDPOINT,
    }


@pytest.fixture
def requester(
    discovery_document: dict[str, str],
    jwks_dict: dict[str, Any],
    make_id_token: Callable[..., str],
) -> FakeRequester:
    """FakeRequester serving discovery, JWKS and both token grants."""
    counter = {"refresh": 0}

    def token_endpoint(data: dict[str, Any]) -> dict[str, Any]:
        if data["grant_type"] == "authorization_code":
            return {
                "access_token": "access_token_value",
                "refresh_token": "refresh_token_value",
                "id_token": make_id_token(),
                "scope": "openid offline_access profile",
                "expires_in": 3600,
            }

        counter["refresh"] += 1
        return {
            "access_token": f"refreshed_access_token_{counter['refresh']}",
            "refresh_token": f"rotated_refresh_token_{counter['refresh']}",
            "scope": data.get("scope", "openid offline_access profile"),
            "expires_in": 3600,
        }

    return FakeRequester(
        routes={
            DISCOVERY_URL: discovery_document,
            JWKS_URI: jwks_dict,
            TOKEN_ENDPOINT: token_endpoint,
            REVOCATION_ENDPOINT: None,
            USERINFO_ENDPOINT: {"sub": "user_id", "name": "Test User"},
        }
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def navigate() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_client(
    requester: FakeRequester,
    storage: MemoryStorage,
    navigate: MagicMock,
) -> Callable[..., LogtoClient]:
    """Factory for clients wired to the fake requester and fixed PKCE values."""

    def factory(**config_overrides: Any) -> LogtoClient:
        config = LogtoConfig(endpoint=ENDPOINT, app_id=APP_ID, **config_overrides)
        adapter = ClientAdapter(
            navigate=navigate,
            storage=storage,
            requester=requester,
            generate_code_verifier=lambda: MOCKED_CODE_VERIFIER,
            generate_code_challenge=lambda verifier: MOCKED_CODE_CHALLENGE,
            generate_state=lambda: MOCKED_STATE,
        )
        return LogtoClient(config, adapter)

    return factory


@pytest.fixture
def client(make_client: Callable[..., LogtoClient]) -> LogtoClient:
    return make_client()
