"""
API dependencies for authentication and authorization.
"""
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.core.database import get_db
from chatbot_studio.core.exceptions import ForbiddenException, UnauthorizedException
from chatbot_studio.models.user import User
from chatbot_studio.services.auth_service import AuthService

# HTTP Bearer security scheme; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency to get the current authenticated user.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        Authenticated User

    Raises:
        UnauthorizedException: If the token is missing, invalid or the user is gone
    """
    if credentials is None:
        raise UnauthorizedException("No token provided")

    payload = AuthService.decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid token")

    user = await AuthService.get_user_by_id(db, payload["sub"])
    if user is None:
        raise UnauthorizedException("Invalid token")

    return user


async def require_admin(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency that only lets ADMIN accounts through."""
    if not user.is_admin:
        raise ForbiddenException("Admin access required")
    return user


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
