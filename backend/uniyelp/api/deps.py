"""
Shared route dependencies: credential resolver, authorization, reconcilers.
"""
from typing import Dict

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from uniyelp.auth.credentials import CredentialResolver
from uniyelp.auth.policies import Policy
from uniyelp.auth.stores import DatabaseApiKeyVerifier, DatabaseSessionStore, DatabaseUserDirectory
from uniyelp.core.config import get_settings
from uniyelp.core.database import get_db
from uniyelp.core.errors import Rejection
from uniyelp.schemas.auth import Principal
from uniyelp.services.reconciler import HierarchyReconciler, reconcilers_from_settings


def get_credential_resolver(db: Session = Depends(get_db)) -> CredentialResolver:
    settings = get_settings()
    return CredentialResolver(
        sessions=DatabaseSessionStore(db, settings.SESSION_COOKIE_NAME),
        api_keys=DatabaseApiKeyVerifier(db),
        users=DatabaseUserDirectory(db),
        api_key_header=settings.API_KEY_HEADER,
    )


def authorize(policy: Policy):
    """
    FastAPI dependency evaluating ``policy`` for the current request.

    Usage:
        @router.get("/users/{id}")
        def read_user(principal: Principal = Depends(authorize(require_admin_or_owner))):
            ...
    """
    def dependency(
        request: Request,
        resolver: CredentialResolver = Depends(get_credential_resolver),
    ) -> Principal:
        outcome = policy(resolver, request.headers, dict(request.path_params))
        if isinstance(outcome, Rejection):
            headers = {"WWW-Authenticate": "Bearer"} if outcome.status_code == 401 else None
            raise HTTPException(status_code=outcome.status_code, detail=outcome.detail, headers=headers)
        return outcome

    return dependency


def get_reconcilers() -> Dict[str, HierarchyReconciler]:
    return reconcilers_from_settings(get_settings())
