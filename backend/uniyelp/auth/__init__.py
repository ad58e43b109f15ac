"""
Authentication and authorization.

``CredentialResolver`` finds the caller; the policies in
``uniyelp.auth.policies`` decide whether the caller may proceed.
"""
from uniyelp.auth.credentials import CredentialResolver, extract_api_key
from uniyelp.auth.policies import (
    guard,
    require_admin_or_owner,
    require_api_key_only,
    require_auth,
    require_owner,
    require_role,
    require_session_only,
)
from uniyelp.auth.stores import (
    ApiKeyVerification,
    ApiKeyVerifier,
    DatabaseApiKeyVerifier,
    DatabaseSessionStore,
    DatabaseUserDirectory,
    SessionInfo,
    SessionValidator,
    UserDirectory,
    UserRecord,
)

__all__ = [
    "CredentialResolver",
    "extract_api_key",
    "guard",
    "require_admin_or_owner",
    "require_api_key_only",
    "require_auth",
    "require_owner",
    "require_role",
    "require_session_only",
    "ApiKeyVerification",
    "ApiKeyVerifier",
    "DatabaseApiKeyVerifier",
    "DatabaseSessionStore",
    "DatabaseUserDirectory",
    "SessionInfo",
    "SessionValidator",
    "UserDirectory",
    "UserRecord",
]
