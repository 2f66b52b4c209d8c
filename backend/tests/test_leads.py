"""
Lead capture and campaign API tests.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models import Bot, LeadCampaign, User
from chatbot_studio.services.lead_service import LeadService


@pytest.fixture
def conversation_factory(client: AsyncClient):
    async def create(bot_id: str, session_id: str = "s1") -> str:
        response = await client.post(
            "/api/v1/chat",
            json={"botId": bot_id, "message": "I want a demo", "sessionId": session_id},
        )
        return response.json()["conversationId"]

    return create


async def create_campaign(client: AsyncClient, headers: dict, **body) -> dict:
    response = await client.post(
        "/api/v1/leads/campaigns",
        json={"name": "Spring", **body},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestLeads:
    """Tests for lead capture and management."""

    @pytest.mark.asyncio
    async def test_capture_and_list(
        self, client: AsyncClient, auth_headers: dict, bot: Bot, conversation_factory
    ):
        conversation_id = await conversation_factory(bot.id)

        response = await client.post(
            "/api/v1/leads",
            json={
                "conversationId": conversation_id,
                "name": "Ann",
                "email": "ann@example.com",
                "data": {"company": "Acme"},
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        lead = response.json()
        assert lead["status"] == "NEW"
        assert lead["score"] == 0
        assert lead["campaignId"] is None

        listed = await client.get("/api/v1/leads", headers=auth_headers)
        assert len(listed.json()) == 1
        assert listed.json()[0]["botName"] == "Support Bot"
        assert listed.json()[0]["data"] == {"company": "Acme"}

    @pytest.mark.asyncio
    async def test_capture_on_other_users_conversation(
        self, client: AsyncClient, auth_headers: dict, other_bot: Bot, conversation_factory
    ):
        conversation_id = await conversation_factory(other_bot.id)

        response = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id, "name": "Bob"},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Conversation not found"

    @pytest.mark.asyncio
    async def test_update_status_and_score(
        self, client: AsyncClient, auth_headers: dict, bot: Bot, conversation_factory
    ):
        conversation_id = await conversation_factory(bot.id)
        created = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id},
            headers=auth_headers,
        )
        lead_id = created.json()["id"]

        response = await client.put(
            f"/api/v1/leads/{lead_id}",
            json={"status": "QUALIFIED", "score": 80},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "QUALIFIED"
        assert response.json()["score"] == 80

        filtered = await client.get(
            "/api/v1/leads", params={"status": "QUALIFIED"}, headers=auth_headers
        )
        assert [item["id"] for item in filtered.json()] == [lead_id]
        empty = await client.get("/api/v1/leads", params={"status": "LOST"}, headers=auth_headers)
        assert empty.json() == []

    @pytest.mark.asyncio
    async def test_score_out_of_range(
        self, client: AsyncClient, auth_headers: dict
    ):
        response = await client.put(
            "/api/v1/leads/any", json={"score": 101}, headers=auth_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete(
        self, client: AsyncClient, auth_headers: dict, bot: Bot, conversation_factory
    ):
        conversation_id = await conversation_factory(bot.id)
        created = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id},
            headers=auth_headers,
        )
        lead_id = created.json()["id"]

        first = await client.delete(f"/api/v1/leads/{lead_id}", headers=auth_headers)
        second = await client.delete(f"/api/v1/leads/{lead_id}", headers=auth_headers)

        assert first.json() == {"message": "Lead deleted"}
        assert second.status_code == 404


class TestCampaigns:
    """Tests for campaigns and lead credits."""

    @pytest.mark.asyncio
    async def test_create_with_default_credits(self, client: AsyncClient, auth_headers: dict):
        campaign = await create_campaign(client, auth_headers)

        assert campaign["creditsLimit"] == 100
        assert campaign["creditsUsed"] == 0
        assert campaign["active"] is True
        assert campaign["_count"] == {"leads": 0}

    @pytest.mark.asyncio
    async def test_lead_consumes_credit(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        auth_headers: dict,
        user: User,
        bot: Bot,
        conversation_factory,
    ):
        campaign = await create_campaign(client, auth_headers, creditsLimit=2)
        conversation_id = await conversation_factory(bot.id)

        response = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id, "campaignId": campaign["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 201
        stored = await LeadService.get_campaign(db_session, campaign["id"], user.id)
        assert stored.credits_used == 1

        listed = await client.get("/api/v1/leads/campaigns", headers=auth_headers)
        assert listed.json()[0]["_count"] == {"leads": 1}

        by_campaign = await client.get(
            "/api/v1/leads", params={"campaignId": campaign["id"]}, headers=auth_headers
        )
        assert len(by_campaign.json()) == 1

    @pytest.mark.asyncio
    async def test_exhausted_credits(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        auth_headers: dict,
        user: User,
        bot: Bot,
        conversation_factory,
    ):
        campaign = await create_campaign(client, auth_headers, creditsLimit=1)
        conversation_id = await conversation_factory(bot.id)
        body = {"conversationId": conversation_id, "campaignId": campaign["id"]}

        first = await client.post("/api/v1/leads", json=body, headers=auth_headers)
        second = await client.post("/api/v1/leads", json=body, headers=auth_headers)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "Campaign credits exhausted"

        stored = await LeadService.get_campaign(db_session, campaign["id"], user.id)
        assert stored.credits_used == 1
        listed = await client.get("/api/v1/leads", headers=auth_headers)
        assert len(listed.json()) == 1

    @pytest.mark.asyncio
    async def test_inactive_campaign(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        auth_headers: dict,
        bot: Bot,
        conversation_factory,
    ):
        campaign = await create_campaign(client, auth_headers)
        stored = await db_session.get(LeadCampaign, campaign["id"])
        stored.active = False
        await db_session.commit()
        conversation_id = await conversation_factory(bot.id)

        response = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id, "campaignId": campaign["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Campaign is not active"

    @pytest.mark.asyncio
    async def test_other_users_campaign(
        self,
        client: AsyncClient,
        auth_headers: dict,
        other_auth_headers: dict,
        bot: Bot,
        conversation_factory,
    ):
        campaign = await create_campaign(client, other_auth_headers)
        conversation_id = await conversation_factory(bot.id)

        response = await client.post(
            "/api/v1/leads",
            json={"conversationId": conversation_id, "campaignId": campaign["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Campaign not found"

    @pytest.mark.asyncio
    async def test_campaigns_are_per_user(
        self, client: AsyncClient, auth_headers: dict, other_auth_headers: dict
    ):
        await create_campaign(client, other_auth_headers)

        response = await client.get("/api/v1/leads/campaigns", headers=auth_headers)

        assert response.json() == []
