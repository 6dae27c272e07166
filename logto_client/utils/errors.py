"""Error types for the Logto client.

Every failure carries an ``ErrorCode`` so callers can branch on the kind of
error instead of on the exception class. The underlying exception, when
there is one, is kept on ``cause`` and chained with ``raise ... from``.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Tagged error kinds."""

    # Client
    SIGN_IN_SESSION_INVALID = "sign_in_session.invalid"
    SIGN_IN_SESSION_NOT_FOUND = "sign_in_session.not_found"
    NOT_AUTHENTICATED = "not_authenticated"
    GET_ACCESS_TOKEN_BY_REFRESH_TOKEN_FAILED = "get_access_token_by_refresh_token_failed"
    INVALID_ID_TOKEN = "invalid_id_token"
    USER_INFO_ENDPOINT_MISSING = "user_info_endpoint_missing"

    # Callback URI verification
    REDIRECT_URI_MISMATCHED = "callback_uri_verification.redirect_uri_mismatched"
    ERROR_FOUND = "callback_uri_verification.error_found"
    MISSING_STATE = "callback_uri_verification.missing_state"
    STATE_MISMATCHED = "callback_uri_verification.state_mismatched"
    MISSING_CODE = "callback_uri_verification.missing_code"

    # ID token
    ID_TOKEN_INVALID_IAT = "id_token.invalid_iat"
    ID_TOKEN_INVALID_TOKEN = "id_token.invalid_token"

    # Transport
    REQUESTER_FAILED = "requester.failed"
    UNEXPECTED_RESPONSE_ERROR = "unexpected_response_error"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.SIGN_IN_SESSION_INVALID: "Invalid sign-in session",
    ErrorCode.SIGN_IN_SESSION_NOT_FOUND: "Sign-in session not found",
    ErrorCode.NOT_AUTHENTICATED: "Not authenticated",
    ErrorCode.GET_ACCESS_TOKEN_BY_REFRESH_TOKEN_FAILED: "Failed to get access token by refresh token",
    ErrorCode.INVALID_ID_TOKEN: "Invalid ID token",
    ErrorCode.USER_INFO_ENDPOINT_MISSING: "Server does not provide a userinfo endpoint",
    ErrorCode.REDIRECT_URI_MISMATCHED: "Redirect URI mismatched",
    ErrorCode.ERROR_FOUND: "Error found",
    ErrorCode.MISSING_STATE: "Missing state",
    ErrorCode.STATE_MISMATCHED: "State mismatched",
    ErrorCode.MISSING_CODE: "Missing code",
    ErrorCode.ID_TOKEN_INVALID_IAT: "Invalid issued at time",
    ErrorCode.ID_TOKEN_INVALID_TOKEN: "Invalid token",
    ErrorCode.REQUESTER_FAILED: "Request to the server failed",
    ErrorCode.UNEXPECTED_RESPONSE_ERROR: "Unexpected response error from the server.",
}


class LogtoError(Exception):
    """Base exception for Logto client errors."""

    def __init__(self, code: ErrorCode, cause: BaseException | None = None, message: str | None = None):
        self.code = code
        self.cause = cause
        self.message = message or ERROR_MESSAGES.get(code, code.value)
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class LogtoClientError(LogtoError):
    """Raised by client operations (session, authentication state, refresh)."""

    pass


class CallbackVerificationError(LogtoError):
    """Raised when the sign-in callback URI fails verification."""

    pass


class LogtoRequestError(LogtoError):
    """Raised when the server answers with a Logto error body ``{code, message}``."""

    def __init__(self, server_code: str, message: str, status_code: int | None = None):
        super().__init__(ErrorCode.UNEXPECTED_RESPONSE_ERROR, message=message)
        self.server_code = server_code
        self.status_code = status_code


class OidcError(Exception):
    """OAuth/OIDC error returned by the authorization server."""

    def __init__(self, error: str, error_description: str | None = None):
        self.error = error
        self.error_description = error_description
        message = f"{error}: {error_description}" if error_description else error
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when client configuration is missing or invalid."""

    pass
