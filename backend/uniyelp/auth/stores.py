"""
Credential stores consumed by the resolver.

The resolver only depends on the three interfaces below. The database-backed
implementations read the ``sessions``, ``api_keys`` and ``users`` tables that
the sign-in flow writes.
"""
from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from sqlalchemy.orm import Session
from starlette.requests import cookie_parser

from uniyelp.core.config import get_settings
from uniyelp.models.user import ApiKey, User, UserSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: str
    role: str


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    user: UserRecord


@dataclass(frozen=True)
class ApiKeyVerification:
    valid: bool
    key_id: Optional[str] = None
    owner_user_id: Optional[str] = None


# =============================================================================
# Interfaces
# =============================================================================


class SessionValidator(ABC):
    @abstractmethod
    def validate_session(self, headers: Mapping[str, str]) -> Optional[SessionInfo]:
        """Return the session carried by the request headers, if any."""


class ApiKeyVerifier(ABC):
    @abstractmethod
    def verify_api_key(self, key: str) -> Optional[ApiKeyVerification]:
        """Check a raw API key."""


class UserDirectory(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserRecord]:
        pass


# =============================================================================
# Database implementations
# =============================================================================


def hash_api_key(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def _is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    if expires_at is None:
        return False
    # SQLite hands back naive datetimes; they are stored as UTC
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= now


def session_token_from_headers(headers: Mapping[str, str], cookie_name: str) -> Optional[str]:
    raw = headers.get("cookie")
    if not raw:
        return None
    cookies = cookie_parser(raw)
    token = cookies.get(cookie_name) or cookies.get(f"__Secure-{cookie_name}")
    return token or None


class DatabaseSessionStore(SessionValidator):
    """Session cookie -> unexpired ``sessions`` row -> user"""

    def __init__(self, db: Session, cookie_name: Optional[str] = None):
        self.db = db
        self.cookie_name = cookie_name or get_settings().SESSION_COOKIE_NAME

    def validate_session(self, headers: Mapping[str, str]) -> Optional[SessionInfo]:
        token = session_token_from_headers(headers, self.cookie_name)
        if token is None:
            return None

        row = (
            self.db.query(UserSession, User)
            .join(User, User.id == UserSession.user_id)
            .filter(UserSession.token == token)
            .first()
        )
        if row is None:
            return None

        session, user = row
        if _is_expired(session.expires_at, datetime.now(timezone.utc)):
            logger.debug("Session %s expired", session.id)
            return None
        return SessionInfo(session_id=session.id, user=UserRecord(id=user.id, role=user.role))


class DatabaseApiKeyVerifier(ApiKeyVerifier):
    """Raw key -> enabled, unexpired ``api_keys`` row"""

    def __init__(self, db: Session):
        self.db = db

    def verify_api_key(self, key: str) -> Optional[ApiKeyVerification]:
        api_key = self.db.query(ApiKey).filter(ApiKey.key_hash == hash_api_key(key)).first()
        if api_key is None:
            return None
        if not api_key.enabled:
            return ApiKeyVerification(valid=False, key_id=api_key.id)
        if _is_expired(api_key.expires_at, datetime.now(timezone.utc)):
            return ApiKeyVerification(valid=False, key_id=api_key.id)
        return ApiKeyVerification(valid=True, key_id=api_key.id, owner_user_id=api_key.user_id)


class DatabaseUserDirectory(UserDirectory):
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            return None
        return UserRecord(id=user.id, role=user.role)
