"""
Integration catalog and configuration API tests.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models import Integration
from chatbot_studio.services.integration_service import slugify


@pytest_asyncio.fixture
async def integrations(db_session: AsyncSession) -> list[Integration]:
    items = [
        Integration(name="Slack", slug="slack", category="messaging"),
        Integration(name="HubSpot", slug="hubspot", category="crm"),
        Integration(name="Old CRM", slug="old-crm", active=False),
    ]
    db_session.add_all(items)
    await db_session.commit()
    return items


def test_slugify():
    assert slugify("Google Sheets") == "google-sheets"
    assert slugify("  Zapier!! ") == "zapier"


class TestCatalog:
    """Tests for the integration catalog."""

    @pytest.mark.asyncio
    async def test_list_active_by_name(
        self, client: AsyncClient, auth_headers: dict, integrations: list[Integration]
    ):
        response = await client.get("/api/v1/integrations", headers=auth_headers)

        assert response.status_code == 200
        assert [i["slug"] for i in response.json()] == ["hubspot", "slack"]

    @pytest.mark.asyncio
    async def test_admin_creates_with_derived_slug(
        self, client: AsyncClient, admin_headers: dict
    ):
        response = await client.post(
            "/api/v1/integrations",
            json={"name": "Google Sheets", "category": "data"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["slug"] == "google-sheets"

    @pytest.mark.asyncio
    async def test_duplicate_name(
        self, client: AsyncClient, admin_headers: dict, integrations: list[Integration]
    ):
        response = await client.post(
            "/api/v1/integrations",
            json={"name": "Slack"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_non_admin_cannot_create(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/v1/integrations",
            json={"name": "Zapier"},
            headers=auth_headers,
        )

        assert response.status_code == 403


class TestConfiguration:
    """Tests for per-user integration configuration."""

    @pytest.mark.asyncio
    async def test_configure_then_replace(
        self, client: AsyncClient, auth_headers: dict, integrations: list[Integration]
    ):
        slack = integrations[0]

        first = await client.post(
            "/api/v1/integrations/configure",
            json={"integrationId": slack.id, "config": {"channel": "#sales"}},
            headers=auth_headers,
        )
        second = await client.post(
            "/api/v1/integrations/configure",
            json={"integrationId": slack.id, "config": {"channel": "#support"}},
            headers=auth_headers,
        )

        assert first.status_code == 201
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["config"] == {"channel": "#support"}

        configured = await client.get("/api/v1/integrations/configured", headers=auth_headers)
        data = configured.json()
        assert len(data) == 1
        assert data[0]["integration"]["slug"] == "slack"

    @pytest.mark.asyncio
    async def test_configure_inactive(
        self, client: AsyncClient, auth_headers: dict, integrations: list[Integration]
    ):
        response = await client.post(
            "/api/v1/integrations/configure",
            json={"integrationId": integrations[2].id, "config": {}},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Integration not found"

    @pytest.mark.asyncio
    async def test_remove(
        self,
        client: AsyncClient,
        auth_headers: dict,
        other_auth_headers: dict,
        integrations: list[Integration],
    ):
        created = await client.post(
            "/api/v1/integrations/configure",
            json={"integrationId": integrations[1].id, "config": {"key": "x"}},
            headers=auth_headers,
        )
        config_id = created.json()["id"]

        not_owner = await client.delete(
            f"/api/v1/integrations/{config_id}", headers=other_auth_headers
        )
        owner = await client.delete(f"/api/v1/integrations/{config_id}", headers=auth_headers)

        assert not_owner.status_code == 404
        assert owner.json() == {"message": "Integration removed"}
        configured = await client.get("/api/v1/integrations/configured", headers=auth_headers)
        assert configured.json() == []
