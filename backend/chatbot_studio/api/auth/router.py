"""
Authentication API router.
"""
from fastapi import APIRouter, status

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.auth.schemas import (
    AccessTokenResponse,
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserResponse,
)
from chatbot_studio.services.auth_service import AuthService

router = APIRouter()


def _auth_response(user, tokens: dict) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenPair(**tokens),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: DbSession,
) -> AuthResponse:
    """
    Create an account and return a token pair.

    Raises:
        ConflictException: If the email is already registered
    """
    user, tokens = await AuthService.register(
        db=db,
        email=request.email,
        password=request.password,
        name=request.name,
    )
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: DbSession,
) -> AuthResponse:
    """
    Authenticate a user and return a token pair.

    Args:
        request: Login credentials
        db: Database session

    Returns:
        User and tokens

    Raises:
        UnauthorizedException: If credentials are invalid
    """
    user, tokens = await AuthService.login(
        db=db,
        email=request.email,
        password=request.password,
    )
    return _auth_response(user, tokens)


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    request: RefreshRequest,
    db: DbSession,
) -> AccessTokenResponse:
    """Exchange a refresh token for a new access token."""
    access_token = await AuthService.refresh(db, request.refresh_token)
    return AccessTokenResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: DbSession,
    request: LogoutRequest | None = None,
) -> MessageResponse:
    """Revoke the given refresh token, if any."""
    await AuthService.logout(db, request.refresh_token if request else None)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: CurrentUser,
) -> UserResponse:
    """
    Get current authenticated user information.

    Args:
        current_user: Current authenticated user

    Returns:
        User information
    """
    return UserResponse.model_validate(current_user)
