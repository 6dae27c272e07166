"""Sign-in session persistence across the redirect round-trip."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..oauth.pkce import generate_code_challenge, generate_code_verifier, generate_state
from ..utils.errors import ErrorCode, LogtoClientError
from .facade import LogtoStorage

logger = logging.getLogger(__name__)


class SignInSession(BaseModel):
    """Pending sign-in: the redirect URI plus its PKCE verifier and state."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    redirect_uri: str = Field(alias="redirectUri")
    code_verifier: str = Field(alias="codeVerifier")
    state: str


@dataclass(frozen=True)
class SignInStart:
    """Values needed to build the authorization URL."""

    state: str
    code_verifier: str
    code_challenge: str


class SignInSessionManager:
    """Owns the ``signInSession`` slot.

    A session is single-use: the consumer clears it right after a callback
    succeeds or definitively fails.
    """

    def __init__(
        self,
        storage: LogtoStorage,
        generate_code_verifier: Callable[[], str] = generate_code_verifier,
        generate_code_challenge: Callable[[str], str] = generate_code_challenge,
        generate_state: Callable[[], str] = generate_state,
    ):
        self.storage = storage
        self._generate_code_verifier = generate_code_verifier
        self._generate_code_challenge = generate_code_challenge
        self._generate_state = generate_state

    def begin(self, redirect_uri: str) -> SignInStart:
        """Create and persist a fresh session for ``redirect_uri``."""
        code_verifier = self._generate_code_verifier()
        code_challenge = self._generate_code_challenge(code_verifier)
        state = self._generate_state()

        self.save(SignInSession(redirect_uri=redirect_uri, code_verifier=code_verifier, state=state))

        return SignInStart(state=state, code_verifier=code_verifier, code_challenge=code_challenge)

    def save(self, session: SignInSession) -> None:
        self.storage.sign_in_session = session.model_dump_json(by_alias=True)

    def current(self) -> SignInSession | None:
        """Return the persisted session, or None when there is none.

        Raises:
            LogtoClientError: ``sign_in_session.invalid`` if the stored value
                is not valid JSON or lacks a required field
        """
        raw = self.storage.sign_in_session
        if not raw:
            return None

        try:
            return SignInSession.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Stored sign-in session failed validation")
            raise LogtoClientError(ErrorCode.SIGN_IN_SESSION_INVALID, cause=e) from e

    def clear(self) -> None:
        self.storage.sign_in_session = None
