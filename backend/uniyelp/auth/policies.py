"""
Authorization policies.

Each policy is a plain function ``(resolver, headers, route_params)`` that
returns either the ``Principal`` or a ``Rejection``; none of them raise or
touch state. Route code plugs them in through ``uniyelp.api.deps.authorize``:

    @router.post("/colleges/{id}/departments")
    async def sync(principal: Principal = Depends(authorize(require_role(Role.ADMIN)))):
        ...

Status codes:
    401  no usable credential
    403  credential present, not enough privilege / not the owner
    400  ownership check without an ``id`` / ``userId`` route parameter

``require_role`` answers 403 for a session with the wrong role but 401 for an
API key with the wrong role; clients depend on that split.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from uniyelp.auth.credentials import CredentialResolver, as_headers
from uniyelp.core.errors import Rejection
from uniyelp.schemas.auth import Principal, Role

logger = logging.getLogger(__name__)

Outcome = Union[Principal, Rejection]
Policy = Callable[[CredentialResolver, Any, Optional[Mapping[str, str]]], Outcome]


def require_auth(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
    """Any credential, session or API key."""
    principal = resolver.resolve(as_headers(headers))
    if principal is None:
        return Rejection.unauthenticated()
    return principal


def require_api_key_only(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
    """API key only; a session cookie is ignored."""
    principal = resolver.resolve_api_key(as_headers(headers))
    if principal is None:
        return Rejection.unauthenticated("Valid API key required")
    return principal


def require_session_only(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
    """Session cookie only; API keys are ignored."""
    principal = resolver.resolve_session(as_headers(headers))
    if principal is None:
        return Rejection.unauthenticated("Session required")
    return principal


def require_role(role: Union[Role, str]) -> Policy:
    """Build a policy admitting only principals with ``role``."""
    role = Role(role)

    def policy(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
        headers = as_headers(headers)

        principal = resolver.resolve_session(headers)
        if principal is not None:
            if principal.role != role:
                logger.info("User %s lacks role %s", principal.id, role.value)
                return Rejection.forbidden(f"Requires {role.value} role")
            return principal

        principal = resolver.resolve_api_key(headers)
        if principal is None or principal.role != role:
            return Rejection.unauthenticated()
        return principal

    policy.__name__ = f"require_role_{role.value}"
    return policy


def _resource_owner_id(route_params: Optional[Mapping[str, str]]) -> Optional[str]:
    params = route_params or {}
    return params.get("id") or params.get("userId") or None


def _check_owner(principal: Principal, route_params) -> Outcome:
    resource_id = _resource_owner_id(route_params)
    if resource_id is None:
        return Rejection.bad_request()
    if resource_id != principal.id:
        logger.warning("User %s denied access to resource of %s", principal.id, resource_id)
        return Rejection.forbidden("Access denied")
    return principal


def require_owner(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
    """Session user must be the one named by ``id`` / ``userId``."""
    outcome = require_session_only(resolver, headers, route_params)
    if isinstance(outcome, Rejection):
        return outcome
    return _check_owner(outcome, route_params)


def require_admin_or_owner(resolver: CredentialResolver, headers, route_params=None) -> Outcome:
    """Admin sessions pass unconditionally; everyone else as ``require_owner``."""
    outcome = require_session_only(resolver, headers, route_params)
    if isinstance(outcome, Rejection):
        return outcome
    if outcome.is_admin:
        return outcome
    return _check_owner(outcome, route_params)


def guard(policy: Policy, continuation: Callable[[Principal], Any]) -> Callable:
    """
    Wrap ``continuation`` so it only runs once ``policy`` admits the caller.

    The returned function takes ``(resolver, headers, route_params)`` and
    returns the rejection unchanged, or whatever ``continuation`` returns.
    """
    def guarded(resolver: CredentialResolver, headers, route_params=None):
        outcome = policy(resolver, headers, route_params)
        if isinstance(outcome, Rejection):
            return outcome
        return continuation(outcome)

    return guarded
