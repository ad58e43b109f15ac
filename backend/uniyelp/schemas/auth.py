"""
Auth Schemas - principal and API key models
"""
from enum import Enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class AuthMethod(str, Enum):
    SESSION = "session"
    API_KEY = "api_key"


class Principal(BaseModel):
    """The caller resolved for a single request"""
    id: str
    role: Role
    auth_method: AuthMethod

    class Config:
        frozen = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class ApiKeyCreate(BaseModel):
    name: Optional[str] = None
    expires_at: Optional[datetime] = None


class ApiKeyResponse(BaseModel):
    id: str
    name: Optional[str] = None
    start: Optional[str] = None
    enabled: bool
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApiKeyCreated(ApiKeyResponse):
    """Returned once, on creation; ``key`` is never stored in clear"""
    key: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = None
