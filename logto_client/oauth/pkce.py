"""PKCE code verifier/challenge and state generation (RFC 7636)."""

import hashlib
import secrets
from base64 import urlsafe_b64encode


def _encode(data: bytes) -> str:
    return urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def generate_code_verifier() -> str:
    """Generate a PKCE code verifier.

    Base64url encoding of 32 random bytes gives 43 characters, the minimum
    length allowed by RFC 7636.
    """
    return _encode(secrets.token_bytes(32))


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier."""
    return _encode(hashlib.sha256(code_verifier.encode("utf-8")).digest())


def generate_state() -> str:
    """Generate a random state value for CSRF protection."""
    return _encode(secrets.token_bytes(32))


def generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE code verifier and challenge.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    code_verifier = generate_code_verifier()
    return code_verifier, generate_code_challenge(code_verifier)
