"""
Authentication and security module.

Verifies the shared-secret bearer credential of an extension point request.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import AuthorizationError

logger = logging.getLogger("gateway.security")

AUTHORIZATION_HEADER = "authorization"
BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class AuthResult:
    allowed: bool
    error: Optional[AuthorizationError] = None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from a ``Bearer <token>`` header value.

    Returns:
        The token (None if the header is missing or uses another scheme)
    """
    if not authorization:
        return None
    try:
        scheme, token = authorization.strip().split(None, 1)
    except ValueError:
        return None
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


def secrets_match(token: str, secret: str) -> bool:
    """Exact comparison that does not leak the mismatch position through timing."""
    return hmac.compare_digest(
        token.encode("utf-8", errors="surrogatepass"),
        secret.encode("utf-8", errors="surrogatepass"),
    )


def authorize(
    headers: Mapping[str, str],
    configured_secret: Optional[str],
    require_secret: bool = False,
) -> AuthResult:
    """
    Decide whether a request may reach the hook.

    Args:
        headers: request headers; ``authorization`` is looked up by exact key
        configured_secret: the extension point secret (None when not configured)
        require_secret: deny every request when no secret is configured

    Returns:
        AuthResult (allowed, or denied with an AuthorizationError)

    Note:
        This function provides pure verification logic only.
        It never raises; the pipeline turns a denial into an error envelope.
    """
    if not configured_secret:
        if require_secret:
            logger.warning(
                "Extension secret is required but not configured",
                extra={"auth_result": "secret_not_configured"},
            )
            return AuthResult(allowed=False, error=AuthorizationError())
        return AuthResult(allowed=True)

    token = extract_bearer_token(headers.get(AUTHORIZATION_HEADER))
    if token is None:
        logger.warning("Missing bearer credential", extra={"auth_result": "missing"})
        return AuthResult(allowed=False, error=AuthorizationError())

    if not secrets_match(token, configured_secret):
        logger.warning("Bearer credential mismatch", extra={"auth_result": "mismatch"})
        return AuthResult(allowed=False, error=AuthorizationError())

    return AuthResult(allowed=True)
