"""
Authentication API tests.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models import RefreshToken, User, UserRole
from chatbot_studio.services.auth_service import AuthService

USER_PASSWORD = "testpassword123"


class TestRegister:
    """Tests for account registration."""

    @pytest.mark.asyncio
    async def test_register_success(
        self, client: AsyncClient, db_session: AsyncSession, mock_email
    ):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "new@example.com", "password": "password123", "name": "New User"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["name"] == "New User"
        assert data["user"]["role"] == "USER"
        assert "passwordHash" not in data["user"]
        assert data["tokens"]["accessToken"]
        assert data["tokens"]["refreshToken"]

        result = await db_session.execute(
            select(RefreshToken).where(RefreshToken.token == data["tokens"]["refreshToken"])
        )
        assert result.scalar_one_or_none() is not None

    @pytest.mark.asyncio
    async def test_register_queues_welcome_email(self, client: AsyncClient, mock_email):
        await client.post(
            "/api/v1/auth/register",
            json={"email": "new@example.com", "password": "password123", "name": "New User"},
        )

        mock_email.assert_called_once()
        to, subject, html = mock_email.call_args.args
        assert to == "new@example.com"
        assert subject == "Welcome to Chatbot Studio"
        assert "New User" in html

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, user: User, mock_email):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": user.email, "password": "password123", "name": "Again"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Email already registered"
        mock_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_email_unique_constraint(
        self, client: AsyncClient, db_session: AsyncSession, user: User, mock_email
    ):
        email = user.email

        # Existence check passes, as for a concurrent registration
        with patch.object(AuthService, "get_user_by_email", AsyncMock(return_value=None)):
            response = await client.post(
                "/api/v1/auth/register",
                json={"email": email, "password": "password123", "name": "Again"},
            )

        assert response.status_code == 409
        assert response.json()["error"] == "Email already registered"
        mock_email.assert_not_called()

        count = await db_session.scalar(
            select(func.count(User.id)).where(User.email == email)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "new@example.com", "password": "short", "name": "New User"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "not-an-email", "password": "password123", "name": "New User"},
        )

        assert response.status_code == 400


class TestLogin:
    """Tests for login."""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, user: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": USER_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == user.id
        assert data["tokens"]["accessToken"]
        assert data["tokens"]["refreshToken"]

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, client: AsyncClient, user: User
    ):
        wrong_password = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": "wrongpassword"},
        )
        unknown_email = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": USER_PASSWORD},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_each_login_issues_a_new_refresh_token(
        self, client: AsyncClient, db_session: AsyncSession, user: User
    ):
        for _ in range(2):
            await client.post(
                "/api/v1/auth/login",
                json={"email": user.email, "password": USER_PASSWORD},
            )

        result = await db_session.execute(
            select(RefreshToken).where(RefreshToken.user_id == user.id)
        )
        tokens = {row.token for row in result.scalars().all()}
        assert len(tokens) == 2


class TestCurrentUser:
    """Tests for /auth/me and bearer handling."""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, user: User, auth_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == user.email
        assert data["role"] == "USER"
        assert "createdAt" in data

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "No token provided"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer invalid_token"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_me_with_expired_token(self, client: AsyncClient, user: User):
        token = AuthService.create_access_token(user, expires_delta=timedelta(seconds=-1))

        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_an_access_token(
        self, client: AsyncClient, user: User
    ):
        token, _ = AuthService.create_refresh_token(user.id)

        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401


class TestRefreshAndLogout:
    """Tests for refresh and logout."""

    async def _login(self, client: AsyncClient, user: User) -> dict:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": USER_PASSWORD},
        )
        return response.json()["tokens"]

    @pytest.mark.asyncio
    async def test_refresh(self, client: AsyncClient, user: User):
        tokens = await self._login(client, user)

        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refreshToken": tokens["refreshToken"]},
        )

        assert response.status_code == 200
        access_token = response.json()["accessToken"]
        me = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        assert me.status_code == 200
        assert me.json()["id"] == user.id

    @pytest.mark.asyncio
    async def test_refresh_after_logout_is_rejected(self, client: AsyncClient, user: User):
        tokens = await self._login(client, user)

        logout = await client.post(
            "/api/v1/auth/logout",
            json={"refreshToken": tokens["refreshToken"]},
        )
        assert logout.status_code == 200
        assert logout.json() == {"message": "Logged out successfully"}

        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refreshToken": tokens["refreshToken"]},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, client: AsyncClient, user: User):
        tokens = await self._login(client, user)

        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refreshToken": tokens["accessToken"]},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unstored_refresh_token_is_rejected(self, client: AsyncClient, user: User):
        token, _ = AuthService.create_refresh_token(user.id)

        response = await client.post("/api/v1/auth/refresh", json={"refreshToken": token})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_without_body(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 200


class TestInitialAdmin:
    """Tests for bootstrapping the first admin account."""

    @pytest.mark.asyncio
    async def test_not_configured(self, db_session: AsyncSession, monkeypatch):
        from chatbot_studio.services import auth_service

        monkeypatch.setattr(auth_service.settings, "admin_email", None)

        assert await AuthService.create_initial_admin(db_session) is None

    @pytest.mark.asyncio
    async def test_creates_admin_once(self, db_session: AsyncSession, monkeypatch):
        from chatbot_studio.services import auth_service

        monkeypatch.setattr(auth_service.settings, "admin_email", "root@example.com")
        monkeypatch.setattr(auth_service.settings, "admin_password", "rootpassword")
        monkeypatch.setattr(auth_service.settings, "admin_name", "Root")

        admin = await AuthService.create_initial_admin(db_session)
        assert admin is not None
        assert admin.role == UserRole.ADMIN
        assert await AuthService.authenticate_user(db_session, "root@example.com", "rootpassword")

        assert await AuthService.create_initial_admin(db_session) is None
