"""
Document upload API tests.
"""
from pathlib import Path
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from chatbot_studio.models import Bot
from chatbot_studio.services.document.processor import DocumentProcessor, UnsupportedDocumentError


async def upload(client: AsyncClient, headers: dict, bot_id: str, name: str, content: bytes, mime: str):
    return await client.post(
        "/api/v1/documents",
        data={"botId": bot_id},
        files={"file": (name, content, mime)},
        headers=headers,
    )


class TestUpload:
    """Tests for uploading documents."""

    @pytest.mark.asyncio
    async def test_upload_text(self, client: AsyncClient, auth_headers: dict, bot: Bot):
        response = await upload(
            client, auth_headers, bot.id, "faq.txt", b"Opening hours are 9 to 5.", "text/plain"
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "faq.txt"
        assert data["type"] == "text/plain"
        assert data["size"] == 25
        assert data["status"] == "COMPLETED"
        assert data["content"] == "Opening hours are 9 to 5."
        assert Path(data["url"]).read_bytes() == b"Opening hours are 9 to 5."

    @pytest.mark.asyncio
    async def test_unsupported_type(self, client: AsyncClient, auth_headers: dict, bot: Bot):
        response = await upload(
            client, auth_headers, bot.id, "archive.zip", b"PK\x03\x04", "application/zip"
        )

        assert response.status_code == 400
        assert response.json()["error"] == "File type 'application/zip' is not supported"

    @pytest.mark.asyncio
    async def test_no_file(self, client: AsyncClient, auth_headers: dict, bot: Bot):
        response = await client.post(
            "/api/v1/documents",
            data={"botId": bot.id},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"

    @pytest.mark.asyncio
    async def test_other_users_bot(
        self, client: AsyncClient, auth_headers: dict, other_bot: Bot
    ):
        response = await upload(
            client, auth_headers, other_bot.id, "faq.txt", b"hi", "text/plain"
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_extraction_failure_is_recorded(
        self, client: AsyncClient, auth_headers: dict, bot: Bot
    ):
        with patch.object(
            DocumentProcessor,
            "process",
            side_effect=UnsupportedDocumentError("broken file"),
        ):
            response = await upload(
                client, auth_headers, bot.id, "bad.pdf", b"%PDF-1.4 garbage", "application/pdf"
            )

        assert response.status_code == 201
        assert response.json()["status"] == "FAILED"
        assert response.json()["errorMessage"] == "broken file"


class TestManage:
    """Tests for listing and deleting documents."""

    @pytest.mark.asyncio
    async def test_list_and_delete(self, client: AsyncClient, auth_headers: dict, bot: Bot):
        created = await upload(client, auth_headers, bot.id, "a.md", b"# Title", "text/markdown")
        document = created.json()

        listed = await client.get(
            "/api/v1/documents", params={"botId": bot.id}, headers=auth_headers
        )
        assert [d["id"] for d in listed.json()] == [document["id"]]

        deleted = await client.delete(f"/api/v1/documents/{document['id']}", headers=auth_headers)
        assert deleted.json() == {"message": "Document deleted"}
        assert not Path(document["url"]).exists()

        missing = await client.delete(f"/api/v1/documents/{document['id']}", headers=auth_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_counts_on_bot(self, client: AsyncClient, auth_headers: dict, bot: Bot):
        await upload(client, auth_headers, bot.id, "a.txt", b"x", "text/plain")

        response = await client.get(f"/api/v1/bots/{bot.id}", headers=auth_headers)

        assert response.json()["_count"]["documents"] == 1
