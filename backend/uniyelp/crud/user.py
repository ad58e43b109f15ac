"""
User and API key CRUD Operations
"""
import secrets
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session

from uniyelp.auth.stores import hash_api_key
from uniyelp.models.user import ApiKey, User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def update_user_name(db: Session, user: User, name: str) -> User:
    user.name = name
    db.commit()
    db.refresh(user)
    return user


def create_api_key(
    db: Session,
    user_id: str,
    prefix: str,
    name: Optional[str] = None,
    expires_at: Optional[datetime] = None
) -> Tuple[ApiKey, str]:
    """Create a key for ``user_id``; returns the record and the raw key"""
    raw_key = f"{prefix}{secrets.token_urlsafe(32)}"
    api_key = ApiKey(
        name=name,
        key_hash=hash_api_key(raw_key),
        start=raw_key[:len(prefix) + 4],
        user_id=user_id,
        enabled=True,
        expires_at=expires_at,
    )
    db.add(api_key)
    db.commit()
    db.refresh(api_key)
    return api_key, raw_key


def get_user_api_keys(db: Session, user_id: str) -> List[ApiKey]:
    return db.query(ApiKey).filter(ApiKey.user_id == user_id).order_by(desc(ApiKey.created_at)).all()


def delete_api_key(db: Session, user_id: str, key_id: str) -> bool:
    api_key = db.query(ApiKey).filter(ApiKey.id == key_id, ApiKey.user_id == user_id).first()
    if not api_key:
        return False
    db.delete(api_key)
    db.commit()
    return True
