"""
Authentication Pydantic schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.user import UserRole


class RegisterRequest(CamelModel):
    """Registration request schema."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)


class LoginRequest(CamelModel):
    """Login request schema."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    """Refresh request schema."""
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(CamelModel):
    """Logout request schema."""
    refresh_token: Optional[str] = None


class TokenPair(CamelModel):
    """Access and refresh tokens."""
    access_token: str
    refresh_token: str


class AccessTokenResponse(CamelModel):
    """Refresh response schema."""
    access_token: str


class UserResponse(CamelModel):
    """User response schema."""
    id: str
    email: str
    name: str
    role: UserRole
    avatar: Optional[str] = None
    created_at: datetime


class AuthResponse(CamelModel):
    """Register/login response schema."""
    user: UserResponse
    tokens: TokenPair
