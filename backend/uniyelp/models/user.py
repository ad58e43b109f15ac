"""
User, session and API key records.

Sessions and keys are issued by the sign-in flow; this service only reads them
to resolve the caller of a request.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from uniyelp.core.database import Base
from uniyelp.models.base import generate_id


class User(Base):
    """User table"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="user", comment="user | admin")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, role={self.role})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class UserSession(Base):
    """Browser session, looked up by the token carried in the session cookie"""
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=generate_id)
    token = Column(String(255), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<UserSession(id={self.id}, user_id={self.user_id})>"


class ApiKey(Base):
    """API key; only the SHA-256 digest of the key is stored"""
    __tablename__ = "api_keys"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=True)
    key_hash = Column(String(64), nullable=False, unique=True, index=True)
    start = Column(String(12), nullable=True, comment="first characters, for display")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    enabled = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<ApiKey(id={self.id}, user_id={self.user_id}, enabled={self.enabled})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start,
            "enabled": self.enabled,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
