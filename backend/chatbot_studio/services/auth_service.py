"""
Authentication service for JWT token management.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.core.config import settings
from chatbot_studio.core.exceptions import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
)
from chatbot_studio.models.user import RefreshToken, User, UserRole
from chatbot_studio.services.email_service import EmailService

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class AuthService:
    """Authentication service for user management and JWT tokens."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against a hashed password."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a plain password."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        user: User,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a JWT access token.

        Args:
            user: Token subject
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT token string
        """
        expire = datetime.utcnow() + (
            expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
        )
        to_encode = {
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
            "type": ACCESS_TOKEN_TYPE,
            "exp": expire,
        }

        return jwt.encode(
            to_encode,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

    @staticmethod
    def create_refresh_token(user_id: str) -> tuple[str, datetime]:
        """
        Create a JWT refresh token.

        The random ``jti`` keeps tokens issued within the same second distinct.

        Returns:
            Tuple of (token, expires_at)
        """
        expires_at = datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days)
        to_encode = {
            "sub": user_id,
            "jti": str(uuid4()),
            "type": REFRESH_TOKEN_TYPE,
            "exp": expires_at,
        }

        token = jwt.encode(
            to_encode,
            settings.jwt_refresh_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        return token, expires_at

    @staticmethod
    def _decode(token: str, secret: str, token_type: str) -> Optional[dict]:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[settings.jwt_algorithm],
            )
        except JWTError:
            return None

        if payload.get("type") != token_type or not payload.get("sub"):
            return None
        return payload

    @staticmethod
    def decode_access_token(token: str) -> Optional[dict]:
        """
        Decode and validate a JWT access token.

        Args:
            token: JWT token string

        Returns:
            Decoded payload dict or None if invalid
        """
        return AuthService._decode(token, settings.jwt_secret_key, ACCESS_TOKEN_TYPE)

    @staticmethod
    def decode_refresh_token(token: str) -> Optional[dict]:
        """Decode and validate a JWT refresh token, or None if invalid."""
        return AuthService._decode(
            token, settings.jwt_refresh_secret_key, REFRESH_TOKEN_TYPE
        )

    @staticmethod
    async def issue_tokens(db: AsyncSession, user: User) -> dict:
        """
        Issue an access/refresh token pair and persist the refresh token.

        The caller commits.
        """
        access_token = AuthService.create_access_token(user)
        refresh_token, expires_at = AuthService.create_refresh_token(user.id)

        db.add(
            RefreshToken(
                user_id=user.id,
                token=refresh_token,
                expires_at=expires_at,
            )
        )
        await db.flush()

        return {"access_token": access_token, "refresh_token": refresh_token}

    @staticmethod
    async def register(
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
    ) -> tuple[User, dict]:
        """
        Register a new account and sign it in.

        Args:
            db: Database session
            email: User email
            password: Plain password
            name: Display name

        Returns:
            Tuple of (user, tokens)

        Raises:
            ConflictException: If the email is already registered
        """
        if await AuthService.get_user_by_email(db, email):
            raise ConflictException("Email already registered")

        user = User(
            email=email,
            password_hash=AuthService.hash_password(password),
            name=name,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await db.rollback()
            raise ConflictException("Email already registered")

        tokens = await AuthService.issue_tokens(db, user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Registered user {user.id}")

        EmailService.send_welcome(user.email, user.name)
        return user, tokens

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        email: str,
        password: str,
    ) -> Optional[User]:
        """
        Authenticate a user by email and password.

        Args:
            db: Database session
            email: User email
            password: Plain password

        Returns:
            User if authenticated, None otherwise
        """
        user = await AuthService.get_user_by_email(db, email)

        if not user:
            return None

        if not AuthService.verify_password(password, user.password_hash):
            return None

        return user

    @staticmethod
    async def login(
        db: AsyncSession,
        email: str,
        password: str,
    ) -> tuple[User, dict]:
        """
        Sign in with email and password.

        Raises:
            UnauthorizedException: Unknown email or wrong password (same message)
        """
        user = await AuthService.authenticate_user(db, email, password)
        if not user:
            logger.warning("Failed login attempt")
            raise UnauthorizedException("Invalid credentials")

        tokens = await AuthService.issue_tokens(db, user)
        await db.commit()

        logger.info(f"User {user.id} logged in")
        return user, tokens

    @staticmethod
    async def refresh(db: AsyncSession, refresh_token: str) -> str:
        """
        Exchange a stored refresh token for a new access token.

        The token must carry a valid refresh signature AND still be on
        record, so a logged-out token is rejected even before it expires.

        Returns:
            New access token

        Raises:
            UnauthorizedException: Invalid, revoked or expired refresh token
            NotFoundException: If the token's user no longer exists
        """
        payload = AuthService.decode_refresh_token(refresh_token)
        if payload is None:
            raise UnauthorizedException("Invalid refresh token")

        result = await db.execute(
            select(RefreshToken).where(RefreshToken.token == refresh_token)
        )
        stored = result.scalar_one_or_none()
        if stored is None or stored.is_expired:
            raise UnauthorizedException("Invalid refresh token")

        user = await AuthService.get_user_by_id(db, stored.user_id)
        if user is None:
            raise NotFoundException("User")

        return AuthService.create_access_token(user)

    @staticmethod
    async def logout(db: AsyncSession, refresh_token: Optional[str] = None) -> None:
        """Revoke a refresh token. Unknown or missing tokens are ignored."""
        if not refresh_token:
            return

        await db.execute(
            delete(RefreshToken).where(RefreshToken.token == refresh_token)
        )
        await db.commit()

    @staticmethod
    async def get_user_by_id(
        db: AsyncSession,
        user_id: str,
    ) -> Optional[User]:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User if found, None otherwise
        """
        result = await db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(
        db: AsyncSession,
        email: str,
    ) -> Optional[User]:
        """
        Get user by email.

        Args:
            db: Database session
            email: User email

        Returns:
            User if found, None otherwise
        """
        result = await db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Create a user account without signing it in.

        Args:
            db: Database session
            email: User email
            password: Plain password
            name: Display name
            role: Account role

        Returns:
            Created User
        """
        user = User(
            email=email,
            password_hash=AuthService.hash_password(password),
            name=name,
            role=role,
        )

        db.add(user)
        await db.commit()
        await db.refresh(user)

        return user

    @staticmethod
    async def create_initial_admin(db: AsyncSession) -> Optional[User]:
        """
        Create initial admin user from environment variables.
        Only creates if no admin users exist.

        Args:
            db: Database session

        Returns:
            Created User or None if not configured or already present
        """
        if not settings.admin_email or not settings.admin_password:
            return None

        result = await db.execute(
            select(User).where(User.role == UserRole.ADMIN).limit(1)
        )
        if result.scalar_one_or_none():
            return None

        if await AuthService.get_user_by_email(db, settings.admin_email):
            logger.warning(
                f"Cannot create initial admin: {settings.admin_email} is already registered"
            )
            return None

        user = await AuthService.create_user(
            db=db,
            email=settings.admin_email,
            password=settings.admin_password,
            name=settings.admin_name,
            role=UserRole.ADMIN,
        )
        logger.info(f"Created initial admin {user.email}")
        return user
