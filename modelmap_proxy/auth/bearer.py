"""Bearer token extraction for forwarding routes."""

from __future__ import annotations

from typing import Mapping

from ..core.exceptions import AuthError

AUTHORIZATION_HEADER = "authorization"
BEARER_SCHEME = "bearer"


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    """Return the caller's bearer token, verbatim, for upstream pass-through.

    Raises:
        AuthError: The header is missing, uses another scheme, or carries
            an empty token.
    """
    auth = headers.get(AUTHORIZATION_HEADER) or headers.get("Authorization")
    if not auth:
        raise AuthError()

    scheme, _, token = auth.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise AuthError()
    return token
