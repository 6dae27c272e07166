"""Logto client: sign-in, callback handling, token access and sign-out.

The client composes the sign-in session manager, the access token cache
and the discovery resolver. Runtime specifics (HTTP transport, storage,
redirects, randomness, ID token verification) are injected through a
``ClientAdapter`` instead of subclassing.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import jwt

from ..constants import DEFAULT_STORAGE_PATH, ReservedScope
from ..oauth.id_token import IdTokenClaims, IdTokenVerifier, decode_id_token, fetch_jwks, verify_id_token
from ..oauth.oidc_config import OidcConfig, fetch_oidc_config, get_discovery_endpoint
from ..oauth.pkce import generate_code_challenge, generate_code_verifier, generate_state
from ..oauth.requester import Requester, create_requester
from ..oauth.sign_in import (
    generate_sign_in_uri,
    generate_sign_out_uri,
    origin_and_path,
    verify_and_parse_code_from_callback_uri,
)
from ..oauth.tokens import (
    CodeTokenResponse,
    fetch_token_by_authorization_code,
    fetch_token_by_refresh_token,
    fetch_user_info,
    revoke,
)
from ..storage.facade import LogtoStorage
from ..storage.session import SignInSessionManager
from ..storage.storage import FileStorage, MemoryStorage, Storage
from ..utils.errors import ErrorCode, LogtoClientError, LogtoError
from ..utils.once import AsyncOnce
from .access_token_cache import AccessToken, AccessTokenCache, build_access_token_key
from .config import LogtoConfig, LogtoSettings

logger = logging.getLogger(__name__)


# Type alias for the redirect capability; may be sync or async
Navigate = Callable[[str], Awaitable[None] | None]


@dataclass
class ClientAdapter:
    """Runtime capabilities injected into ``LogtoClient``.

    ``storage`` and ``requester`` fall back to in-memory storage (or file
    storage when the config asks for persistence) and an httpx requester.
    """

    navigate: Navigate
    storage: Storage | None = None
    requester: Requester | None = None
    generate_code_verifier: Callable[[], str] = generate_code_verifier
    generate_code_challenge: Callable[[str], str] = generate_code_challenge
    generate_state: Callable[[], str] = generate_state
    verify_id_token: IdTokenVerifier = verify_id_token
    clock: Callable[[], float] = time.time


class LogtoClient:
    """OAuth 2.0 authorization code flow with PKCE against a Logto server.

    Example:
        client = LogtoClient(
            LogtoConfig(endpoint="https://logto.dev", app_id="foo"),
            ClientAdapter(navigate=redirect_user),
        )
        await client.sign_in("https://app.example/callback")
        # ... user returns to the callback URL ...
        await client.handle_sign_in_callback(callback_url)
        token = await client.get_access_token()
    """

    def __init__(self, config: LogtoConfig, adapter: ClientAdapter):
        """Initialize the client.

        Args:
            config: Client configuration
            adapter: Runtime capabilities
        """
        self.config = config

        storage = adapter.storage
        if storage is None:
            if config.using_persist_storage:
                storage = FileStorage(DEFAULT_STORAGE_PATH, config.app_id)
            else:
                storage = MemoryStorage()

        self.storage = LogtoStorage(storage)
        self.requester = adapter.requester or create_requester(
            app_id=config.app_id, app_secret=config.app_secret
        )
        self.navigate = adapter.navigate
        self.sign_in_session = SignInSessionManager(
            self.storage,
            generate_code_verifier=adapter.generate_code_verifier,
            generate_code_challenge=adapter.generate_code_challenge,
            generate_state=adapter.generate_state,
        )
        self.access_token_cache = AccessTokenCache(clock=adapter.clock)
        self.clock = adapter.clock
        self._verify_id_token = adapter.verify_id_token

        self.get_oidc_config: AsyncOnce[OidcConfig] = AsyncOnce(self._fetch_oidc_config)
        self.get_jwks: AsyncOnce[jwt.PyJWKSet] = AsyncOnce(self._fetch_jwks)

    @classmethod
    def from_settings(
        cls,
        settings: LogtoSettings,
        navigate: Navigate,
        **adapter_options: Any,
    ) -> "LogtoClient":
        """Build a client from ``LOGTO_*`` settings.

        Persistent storage uses ``settings.storage_path`` and the optional
        encryption key; the default requester uses ``settings.request_timeout``.
        """
        config = settings.to_config()

        if "storage" not in adapter_options and config.using_persist_storage:
            adapter_options["storage"] = FileStorage(
                settings.storage_path,
                config.app_id,
                encryption_key=settings.storage_encryption_key,
            )

        if "requester" not in adapter_options:
            adapter_options["requester"] = create_requester(
                app_id=config.app_id,
                app_secret=config.app_secret,
                timeout=settings.request_timeout,
            )

        return cls(config, ClientAdapter(navigate=navigate, **adapter_options))

    @property
    def is_authenticated(self) -> bool:
        """Whether an ID token is stored. Local and unverified."""
        return self.storage.id_token is not None

    async def _fetch_oidc_config(self) -> OidcConfig:
        return await fetch_oidc_config(get_discovery_endpoint(self.config.endpoint), self.requester)

    async def _fetch_jwks(self) -> jwt.PyJWKSet:
        oidc_config = await self.get_oidc_config()
        return await fetch_jwks(oidc_config.jwks_uri, self.requester)

    async def _do_navigate(self, url: str) -> None:
        result = self.navigate(url)
        if asyncio.iscoroutine(result):
            await result

    async def _verify_id_token_or_raise(self, id_token: str) -> None:
        oidc_config = await self.get_oidc_config()
        jwks = await self.get_jwks()

        try:
            await self._verify_id_token(id_token, self.config.app_id, oidc_config.issuer, jwks)
        except Exception as e:
            raise LogtoClientError(ErrorCode.INVALID_ID_TOKEN, cause=e) from e

    def _clear_tokens(self) -> None:
        self.access_token_cache.clear()
        self.storage.refresh_token = None
        self.storage.id_token = None

    async def sign_in(
        self,
        redirect_uri: str,
        *,
        interaction_mode: str | None = None,
        login_hint: str | None = None,
    ) -> None:
        """Start sign-in: persist a new session and redirect to the authorization URL.

        Any stored tokens are dropped. A second call overwrites the pending
        session of the first.

        Args:
            redirect_uri: Where the server should send the user back
            interaction_mode: Optional first screen ("signIn" or "signUp")
            login_hint: Optional identifier to prefill
        """
        oidc_config = await self.get_oidc_config()
        start = self.sign_in_session.begin(redirect_uri)

        sign_in_uri = generate_sign_in_uri(
            authorization_endpoint=oidc_config.authorization_endpoint,
            client_id=self.config.app_id,
            redirect_uri=redirect_uri,
            code_challenge=start.code_challenge,
            state=start.state,
            scopes=self.config.scopes,
            resources=self.config.resources,
            prompt=self.config.prompt,
            interaction_mode=interaction_mode,
            login_hint=login_hint,
        )

        self._clear_tokens()

        logger.info(f"Starting sign-in, redirecting to {oidc_config.authorization_endpoint}")
        await self._do_navigate(sign_in_uri)

    def is_sign_in_redirected(self, url: str) -> bool:
        """Whether ``url`` is the redirect URI of the pending sign-in session."""
        session = self.sign_in_session.current()
        if session is None:
            return False

        try:
            return origin_and_path(url) == origin_and_path(session.redirect_uri)
        except ValueError:
            return False

    async def handle_sign_in_callback(self, callback_uri: str) -> None:
        """Complete sign-in from the callback URI.

        Verifies the callback against the pending session, exchanges the
        code, verifies the ID token, then stores the tokens and clears the
        session. The session is left in place when any step fails.

        Raises:
            LogtoClientError: ``sign_in_session.not_found`` without a pending
                session, ``invalid_id_token`` if verification fails
            CallbackVerificationError: If the callback carries an error,
                lacks code or state, or the state does not match
        """
        session = self.sign_in_session.current()
        if session is None:
            raise LogtoClientError(ErrorCode.SIGN_IN_SESSION_NOT_FOUND)

        code = verify_and_parse_code_from_callback_uri(
            callback_uri, session.redirect_uri, session.state
        )

        oidc_config = await self.get_oidc_config()
        code_token_response = await fetch_token_by_authorization_code(
            client_id=self.config.app_id,
            token_endpoint=oidc_config.token_endpoint,
            redirect_uri=session.redirect_uri,
            code_verifier=session.code_verifier,
            code=code,
            requester=self.requester,
        )

        await self._verify_id_token_or_raise(code_token_response.id_token)

        # No await between these writes so no other task sees a partial state
        self._save_code_token(code_token_response)
        self.sign_in_session.clear()

        logger.info("Sign-in callback handled, user authenticated")

    def _save_code_token(self, response: CodeTokenResponse) -> None:
        self.storage.refresh_token = response.refresh_token
        self.storage.id_token = response.id_token

        self.access_token_cache.set(
            build_access_token_key(),
            AccessToken(
                token=response.access_token,
                scope=response.scope,
                expires_at=self.clock() + response.expires_in,
            ),
        )

    async def get_access_token(self, resource: str | None = None) -> str:
        """Return an access token for ``resource``, refreshing when needed.

        Concurrent calls for the same resource share one refresh.

        Raises:
            LogtoClientError: ``not_authenticated`` without an ID or refresh
                token, ``get_access_token_by_refresh_token_failed`` if the
                refresh fails
        """
        if self.storage.id_token is None:
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        return await self.access_token_cache.get_or_refresh(
            build_access_token_key(resource),
            lambda: self._get_access_token_by_refresh_token(resource),
        )

    async def _get_access_token_by_refresh_token(self, resource: str | None) -> AccessToken:
        refresh_token = self.storage.refresh_token
        if refresh_token is None:
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        # Bumped by _clear_tokens; a sign-in or sign-out while the grant runs discards its result
        generation = self.access_token_cache.generation

        try:
            oidc_config = await self.get_oidc_config()
            response = await fetch_token_by_refresh_token(
                client_id=self.config.app_id,
                token_endpoint=oidc_config.token_endpoint,
                refresh_token=refresh_token,
                requester=self.requester,
                resource=resource,
                # Requesting only offline_access keeps openid out of resource tokens
                scopes=[ReservedScope.OFFLINE_ACCESS.value] if resource else None,
            )

            if response.id_token:
                await self._verify_id_token_or_raise(response.id_token)
        except Exception as e:
            logger.warning(f"Failed to refresh access token: {e}")
            raise LogtoClientError(ErrorCode.GET_ACCESS_TOKEN_BY_REFRESH_TOKEN_FAILED, cause=e) from e

        if generation != self.access_token_cache.generation:
            logger.info("Tokens were cleared while refreshing, dropping the refreshed tokens")
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        if response.refresh_token:
            self.storage.refresh_token = response.refresh_token
        if response.id_token:
            self.storage.id_token = response.id_token

        return AccessToken(
            token=response.access_token,
            scope=response.scope,
            expires_at=round(self.clock()) + response.expires_in,
        )

    def get_id_token_claims(self) -> IdTokenClaims:
        """Decode the stored ID token without verifying it.

        Raises:
            LogtoClientError: ``not_authenticated`` without an ID token
        """
        id_token = self.storage.id_token
        if id_token is None:
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        return decode_id_token(id_token)

    async def fetch_user_info(self) -> dict[str, Any]:
        """Fetch userinfo claims with the default access token."""
        if self.storage.id_token is None:
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        oidc_config = await self.get_oidc_config()
        if not oidc_config.userinfo_endpoint:
            raise LogtoClientError(ErrorCode.USER_INFO_ENDPOINT_MISSING)

        access_token = await self.get_access_token()
        return await fetch_user_info(oidc_config.userinfo_endpoint, access_token, self.requester)

    async def sign_out(self, post_logout_redirect_uri: str | None = None) -> None:
        """Revoke the refresh token, drop local tokens and redirect to end-session.

        A failed revocation is logged and ignored. Local tokens are cleared
        even if discovery fails.

        Raises:
            LogtoClientError: ``not_authenticated`` without an ID token
        """
        id_token = self.storage.id_token
        if id_token is None:
            raise LogtoClientError(ErrorCode.NOT_AUTHENTICATED)

        try:
            oidc_config = await self.get_oidc_config()
        except LogtoError:
            self._clear_tokens()
            raise

        refresh_token = self.storage.refresh_token
        if refresh_token:
            try:
                await revoke(
                    oidc_config.revocation_endpoint,
                    self.config.app_id,
                    refresh_token,
                    self.requester,
                )
            except Exception as e:
                logger.warning(f"Failed to revoke refresh token, continuing sign-out: {e}")

        sign_out_uri = generate_sign_out_uri(
            end_session_endpoint=oidc_config.end_session_endpoint,
            id_token=id_token,
            post_logout_redirect_uri=post_logout_redirect_uri,
        )

        self._clear_tokens()

        logger.info("Signed out, redirecting to end-session endpoint")
        await self._do_navigate(sign_out_uri)
