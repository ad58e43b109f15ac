"""
Credential resolution.

Turns request headers into at most one ``Principal``. The session cookie is
tried first, then an API key from ``X-API-Key`` or ``Authorization: Bearer``.
Nothing else in the service reads credentials off the request.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from starlette.datastructures import Headers

from uniyelp.auth.stores import ApiKeyVerifier, SessionValidator, UserDirectory, UserRecord
from uniyelp.core.config import get_settings
from uniyelp.schemas.auth import AuthMethod, Principal, Role

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def as_headers(headers) -> Headers:
    """Case-insensitive view over a plain mapping or starlette ``Headers``."""
    if isinstance(headers, Headers):
        return headers
    return Headers(headers=dict(headers or {}))


def extract_api_key(headers: Mapping[str, str], header_name: Optional[str] = None) -> Optional[str]:
    """
    Read an API key from ``X-API-Key`` or ``Authorization: Bearer <key>``
    (the scheme is matched case-insensitively).

    Returns None when neither header carries a non-empty key.
    """
    headers = as_headers(headers)
    header_name = header_name or get_settings().API_KEY_HEADER

    key = headers.get(header_name)
    if key and key.strip():
        return key.strip()

    authorization = headers.get("authorization")
    if authorization and authorization[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX.lower():
        key = authorization[len(BEARER_PREFIX):].strip()
        if key:
            return key
    return None


def _role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        logger.warning("Unknown role %r treated as %s", value, Role.USER.value)
        return Role.USER


def _principal(user: UserRecord, method: AuthMethod) -> Principal:
    return Principal(id=user.id, role=_role(user.role), auth_method=method)


class CredentialResolver:
    """Resolves the caller of a request from its headers."""

    def __init__(
        self,
        sessions: SessionValidator,
        api_keys: ApiKeyVerifier,
        users: UserDirectory,
        api_key_header: Optional[str] = None,
    ):
        self.sessions = sessions
        self.api_keys = api_keys
        self.users = users
        self.api_key_header = api_key_header

    def resolve(self, headers) -> Optional[Principal]:
        """Session first, then API key. None means unauthenticated."""
        headers = as_headers(headers)
        principal = self.resolve_session(headers)
        if principal is not None:
            return principal
        return self.resolve_api_key(headers)

    def resolve_session(self, headers) -> Optional[Principal]:
        session = self.sessions.validate_session(as_headers(headers))
        if session is None:
            return None
        return _principal(session.user, AuthMethod.SESSION)

    def resolve_api_key(self, headers) -> Optional[Principal]:
        key = extract_api_key(headers, self.api_key_header)
        if key is None:
            return None

        verification = self.api_keys.verify_api_key(key)
        if verification is None or not verification.valid:
            logger.info("Rejected invalid API key")
            return None

        owner = self.users.get_user(verification.owner_user_id) if verification.owner_user_id else None
        if owner is None:
            logger.warning("API key %s has no owning user", verification.key_id)
            return None
        return _principal(owner, AuthMethod.API_KEY)
