"""
Integration tests for Notification API endpoints.
"""
import pytest


@pytest.mark.asyncio
class TestPushTokenAPI:
    """Test cases for push token registration."""

    async def test_register_and_remove(self, client, auth_headers_for, alice):
        response = await client.post(
            "/api/v1/notifications/push-tokens",
            headers=auth_headers_for(alice),
            json={"token": "ExponentPushToken[abc]", "platform": "ios"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token"] == "ExponentPushToken[abc]"
        assert data["user_id"] == alice.id

        response = await client.delete(
            "/api/v1/notifications/push-tokens/ExponentPushToken[abc]", headers=auth_headers_for(alice)
        )
        assert response.status_code == 204

        response = await client.delete(
            "/api/v1/notifications/push-tokens/ExponentPushToken[abc]", headers=auth_headers_for(alice)
        )
        assert response.status_code == 404

    async def test_invalid_platform(self, client, auth_headers_for, alice):
        response = await client.post(
            "/api/v1/notifications/push-tokens",
            headers=auth_headers_for(alice),
            json={"token": "tok", "platform": "fax"},
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestNotificationInboxAPI:
    """Test cases for the notification inbox."""

    async def test_friend_request_lands_in_inbox(self, client, auth_headers_for, alice, bob):
        await client.post(
            "/api/v1/friends/requests", headers=auth_headers_for(alice), json={"addressee_id": bob.id}
        )

        response = await client.get("/api/v1/notifications/", headers=auth_headers_for(bob))
        data = response.json()
        assert data["unread_count"] == 1
        assert data["notifications"][0]["type"] == "friend_request"
        assert data["notifications"][0]["data"]["userId"] == alice.id

        notification_id = data["notifications"][0]["id"]

        response = await client.post(
            f"/api/v1/notifications/{notification_id}/read", headers=auth_headers_for(bob)
        )
        assert response.status_code == 204

        response = await client.get("/api/v1/notifications/unread-count", headers=auth_headers_for(bob))
        assert response.json() == {"unread_count": 0}

        response = await client.delete(
            f"/api/v1/notifications/{notification_id}", headers=auth_headers_for(bob)
        )
        assert response.status_code == 204

    async def test_read_all(self, client, auth_headers_for, alice, bob, carol):
        for sender in (alice, carol):
            await client.post(
                "/api/v1/friends/requests", headers=auth_headers_for(sender), json={"addressee_id": bob.id}
            )

        response = await client.post("/api/v1/notifications/read-all", headers=auth_headers_for(bob))
        assert response.json() == {"unread_count": 0}

        response = await client.get(
            "/api/v1/notifications/", headers=auth_headers_for(bob), params={"unread_only": True}
        )
        assert response.json()["notifications"] == []

    async def test_limit_bounds(self, client, auth_headers_for, alice):
        response = await client.get(
            "/api/v1/notifications/", headers=auth_headers_for(alice), params={"limit": 0}
        )

        assert response.status_code == 422
