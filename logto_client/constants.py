"""Protocol constants shared across the client."""

from enum import StrEnum
from pathlib import Path


class ReservedScope(StrEnum):
    """Scopes that are always requested."""

    OPENID = "openid"
    OFFLINE_ACCESS = "offline_access"
    PROFILE = "profile"


class UserScope(StrEnum):
    """Optional scopes for additional user claims."""

    EMAIL = "email"
    PHONE = "phone"
    CUSTOM_DATA = "custom_data"
    IDENTITIES = "identities"
    ROLES = "roles"
    ORGANIZATIONS = "urn:logto:scope:organizations"


class Prompt(StrEnum):
    """Values for the `prompt` authorization parameter."""

    CONSENT = "consent"
    LOGIN = "login"


class InteractionMode(StrEnum):
    """Initial screen shown by the sign-in experience."""

    SIGN_IN = "signIn"
    SIGN_UP = "signUp"


class StorageKey(StrEnum):
    """Logical storage slots."""

    ID_TOKEN = "idToken"
    REFRESH_TOKEN = "refreshToken"
    SIGN_IN_SESSION = "signInSession"


RESERVED_SCOPES = [scope.value for scope in ReservedScope]

DISCOVERY_PATH = "/oidc/.well-known/openid-configuration"

CODE_CHALLENGE_METHOD = "S256"
RESPONSE_TYPE = "code"
DEFAULT_PORTS = {"http": 80, "https": 443}

# RFC 7636 section 4.1
CODE_VERIFIER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
CODE_VERIFIER_MIN_LENGTH = 43

# ID token verification
CLOCK_TOLERANCE = 60
SUPPORTED_ID_TOKEN_ALGORITHMS = ["RS256", "RS384", "RS512", "ES256", "ES384", "ES512"]

STORAGE_KEY_PREFIX = "logto"
DEFAULT_STORAGE_PATH = Path.home() / ".logto" / "storage.json"
