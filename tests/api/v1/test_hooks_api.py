"""
Integration tests for the database webhook endpoints.
"""
import pytest

from app.config import settings
from app.services.notification_service import NotificationService


@pytest.mark.asyncio
class TestHooksAPI:
    """Test cases for fan-out webhooks."""

    async def test_message_hook_sends_batch(self, client, gateway, db_session, alice, bob, conversation_id):
        await NotificationService(db_session).register_push_token(bob.id, "tok-bob", "android")
        await db_session.commit()

        response = await client.post("/api/v1/hooks/messages", json={
            "type": "INSERT",
            "table": "messages",
            "record": {
                "id": "m1",
                "conversation_id": conversation_id,
                "sender_id": alice.id,
                "content": "Zoomies at noon",
                "created_at": "2026-05-01T12:00:00Z",
            },
        })

        assert response.status_code == 200
        assert response.json()["status"] == "sent"
        assert len(gateway.batches) == 1
        assert gateway.batches[0][0]["to"] == "tok-bob"

    async def test_gateway_failure_is_502(self, client, gateway, db_session, alice, bob, conversation_id):
        await NotificationService(db_session).register_push_token(bob.id, "tok-bob")
        await db_session.commit()
        gateway.down = True

        response = await client.post("/api/v1/hooks/messages", json={
            "record": {"conversation_id": conversation_id, "sender_id": alice.id, "content": "hi"},
        })

        assert response.status_code == 502
        assert response.json()["reason"] == "gateway_unavailable"

    async def test_invalid_payload_is_skipped(self, client, gateway):
        response = await client.post("/api/v1/hooks/check-ins", json={"unexpected": True})

        assert response.status_code == 200
        assert response.json()["status"] == "skipped"
        assert response.json()["reason"] == "invalid_payload"
        assert gateway.batches == []

    async def test_review_reply_missing_parent(self, client, bob):
        response = await client.post("/api/v1/hooks/review-replies", json={
            "reply_id": "r2", "parent_id": "r1", "replier_id": bob.id, "park_id": "p1",
        })

        assert response.status_code == 200
        assert response.json()["reason"] == "parent_not_found"

    async def test_secret_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "webhook_secret", "s3cret")

        response = await client.post("/api/v1/hooks/check-ins", json={})
        assert response.status_code == 401

        response = await client.post(
            "/api/v1/hooks/check-ins", json={}, headers={"X-Webhook-Secret": "s3cret"}
        )
        assert response.status_code == 200


@pytest.mark.asyncio
class TestHealthAPI:
    """Test cases for health endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
