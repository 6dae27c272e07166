"""Authorization, callback and end-session URL handling."""

from urllib.parse import parse_qs, urlencode, urlsplit

from ..constants import CODE_CHALLENGE_METHOD, DEFAULT_PORTS, RESPONSE_TYPE, Prompt
from ..utils.errors import CallbackVerificationError, ErrorCode, OidcError


def generate_sign_in_uri(
    *,
    authorization_endpoint: str,
    client_id: str,
    redirect_uri: str,
    code_challenge: str,
    state: str,
    scopes: list[str],
    resources: list[str] | None = None,
    prompt: str | list[str] | None = None,
    interaction_mode: str | None = None,
    login_hint: str | None = None,
) -> str:
    """Build the authorization request URL.

    Each resource is appended as its own ``resource`` parameter.
    """
    if isinstance(prompt, list):
        prompt_value = " ".join(prompt)
    else:
        prompt_value = prompt or Prompt.CONSENT.value

    params: list[tuple[str, str]] = [
        ("client_id", client_id),
        ("redirect_uri", redirect_uri),
        ("code_challenge", code_challenge),
        ("code_challenge_method", CODE_CHALLENGE_METHOD),
        ("state", state),
        ("response_type", RESPONSE_TYPE),
        ("prompt", prompt_value),
        ("scope", " ".join(scopes)),
    ]

    if login_hint:
        params.append(("login_hint", login_hint))

    for resource in resources or []:
        params.append(("resource", resource))

    if interaction_mode:
        params.append(("interaction_mode", interaction_mode))

    return f"{authorization_endpoint}?{urlencode(params)}"


def generate_sign_out_uri(
    *,
    end_session_endpoint: str,
    id_token: str,
    post_logout_redirect_uri: str | None = None,
) -> str:
    params = {"id_token_hint": id_token}
    if post_logout_redirect_uri:
        params["post_logout_redirect_uri"] = post_logout_redirect_uri

    return f"{end_session_endpoint}?{urlencode(params)}"


def origin_and_path(url: str) -> str:
    """Normalize a URL to ``scheme://host[:port]/path`` for comparison.

    Scheme and host are lowercased, the scheme's default port is dropped
    and an empty path becomes ``/``. Query and fragment are ignored.

    Raises:
        ValueError: If the port is not a valid number
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    return f"{scheme}://{host}{parts.path or '/'}"


def parse_callback_params(callback_uri: str) -> dict[str, str]:
    """Return the first value of each query parameter of a callback URI."""
    query = parse_qs(urlsplit(callback_uri).query, keep_blank_values=True)
    return {key: values[0] for key, values in query.items() if values}


def verify_and_parse_code_from_callback_uri(
    callback_uri: str,
    redirect_uri: str,
    state: str,
) -> str:
    """Validate a sign-in callback and extract the authorization code.

    Args:
        callback_uri: URI the authorization server redirected to
        redirect_uri: Redirect URI stored with the sign-in session
        state: State stored with the sign-in session

    Returns:
        Authorization code

    Raises:
        CallbackVerificationError: If the callback does not belong to the
            session, carries an error, or lacks code/state
    """
    if not callback_uri.startswith(redirect_uri):
        raise CallbackVerificationError(ErrorCode.REDIRECT_URI_MISMATCHED)

    params = parse_callback_params(callback_uri)

    error = params.get("error")
    if error:
        oidc_error = OidcError(error, params.get("error_description"))
        raise CallbackVerificationError(ErrorCode.ERROR_FOUND, cause=oidc_error) from oidc_error

    callback_state = params.get("state")
    if not callback_state:
        raise CallbackVerificationError(ErrorCode.MISSING_STATE)

    if callback_state != state:
        raise CallbackVerificationError(ErrorCode.STATE_MISMATCHED)

    code = params.get("code")
    if not code:
        raise CallbackVerificationError(ErrorCode.MISSING_CODE)

    return code
