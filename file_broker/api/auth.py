"""
Request Authentication

Turns HTTP credentials into domain identities. Three schemes are used:

- Bearer JWT for end users (download routes)
- ``X-Internal-Token`` shared secret for trusted services (upload, delete)
- Storage webhook secret in ``Authorization`` for object-store notifications

Failures raise AuthenticationError; routes render it as a 401.
"""

import hmac
from functools import wraps
from typing import Any, Dict, Iterable, List, Optional

import jwt
from flask import current_app, request

from file_broker.config.settings import AuthConfig
from file_broker.domain.errors import AuthenticationError, ErrorCategory, create_error_response
from file_broker.domain.file_storage import Identity

INTERNAL_TOKEN_HEADER = "X-Internal-Token"
BEARER_PREFIX = "Bearer "

# Tokens are verified with a shared secret, so only HMAC algorithms apply
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


def _auth_config() -> AuthConfig:
    config = getattr(current_app, "auth_config", None)
    return config if config is not None else AuthConfig()


def _scopes_from_claim(claim: Any) -> List[str]:
    """Accept ``scope`` as a space-separated string or a list of strings."""
    if claim is None:
        return []
    if isinstance(claim, str):
        return claim.split()
    if isinstance(claim, (list, tuple)):
        return [str(item) for item in claim]
    return []


def identity_from_claims(claims: Dict[str, Any]) -> Identity:
    """
    Build an Identity from decoded JWT claims.

    Args:
        claims: Verified token payload

    Returns:
        Identity with ``sub`` as user id and the ``scope`` claim as scopes
    """
    return Identity.from_claims(claims.get("sub"), _scopes_from_claim(claims.get("scope")))


def decode_bearer_token(token: str, secret: Optional[str], algorithms: Iterable[str]) -> Identity:
    """
    Verify a JWT and extract the identity it carries.

    Args:
        token: Encoded JWT
        secret: HMAC signing secret
        algorithms: Allowed algorithm names

    Returns:
        Identity of the token subject

    Raises:
        AuthenticationError: If the token is expired, malformed or badly signed
    """
    if not secret:
        raise AuthenticationError("JWT secret not configured")

    allowed = [alg for alg in algorithms if alg in HMAC_ALGORITHMS]
    if not allowed:
        raise AuthenticationError("No HMAC algorithm allowed for JWT verification")

    try:
        claims = jwt.decode(token, secret, algorithms=allowed)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}")

    return identity_from_claims(claims)


def authenticate_request() -> Optional[Identity]:
    """
    Resolve the identity of the current request.

    Returns:
        Identity, or None when the request carries no bearer token

    Raises:
        AuthenticationError: If a bearer token is present but invalid
    """
    authorization = request.headers.get("Authorization", "")
    if not authorization.startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return None

    config = _auth_config()
    return decode_bearer_token(token, config.jwt_secret, config.jwt_algorithms)


def _secrets_match(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def verify_internal_token() -> None:
    """
    Check the internal service token of the current request.

    Raises:
        AuthenticationError: If the secret is unconfigured, missing or wrong
    """
    expected = _auth_config().internal_secret
    if not expected:
        raise AuthenticationError("Internal service secret not configured")

    provided = request.headers.get(INTERNAL_TOKEN_HEADER, "")
    if not provided or not _secrets_match(provided, expected):
        raise AuthenticationError("Invalid internal token")


def verify_webhook_secret() -> None:
    """
    Check the storage webhook secret of the current request.

    The secret may be sent bare or with a ``Bearer`` prefix. When no secret
    is configured every notification is accepted.

    Raises:
        AuthenticationError: If a secret is configured and does not match
    """
    expected = _auth_config().webhook_secret
    if not expected:
        return

    provided = request.headers.get("Authorization", "")
    if provided.startswith(BEARER_PREFIX):
        provided = provided[len(BEARER_PREFIX):]
    if not provided or not _secrets_match(provided.strip(), expected):
        raise AuthenticationError("Invalid webhook secret")


def unauthorized_response(error: AuthenticationError):
    """Log a rejected request and build the 401 error response."""
    current_app.logger.warning(f"Rejected {request.method} {request.path}: {error.technical_message}")
    return create_error_response(
        ErrorCategory.UNAUTHORIZED, error.technical_message, status_code=error.http_status_code
    )


def _guarded(check):
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                check()
            except AuthenticationError as e:
                return unauthorized_response(e)
            return f(*args, **kwargs)
        return wrapper
    return decorator


require_internal_token = _guarded(verify_internal_token)

require_webhook_secret = _guarded(verify_webhook_secret)
