"""
Tests for the push gateway client.
"""
import json

import httpx
import pytest

from app.core.push_gateway import PushGatewayClient, PushGatewayException
from app.schemas.notification import PushMessage

URL = "https://push.test/--/api/v2/push/send"


def _client(handler, **kwargs) -> PushGatewayClient:
    return PushGatewayClient(url=URL, transport=httpx.MockTransport(handler), **kwargs)


def _messages(*tokens):
    return [PushMessage(to=t, title="Title", body="Body", data={"k": "v"}) for t in tokens]


@pytest.mark.asyncio
class TestPushGatewayClient:
    """Test cases for PushGatewayClient.send_batch."""

    async def test_single_request_for_batch(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [{"status": "ok", "id": "a"}, {"status": "ok", "id": "b"}]})

        tickets = await _client(handler).send_batch(_messages("t1", "t2"))

        assert len(seen) == 1
        assert str(seen[0].url) == URL
        body = json.loads(seen[0].content)
        assert [m["to"] for m in body] == ["t1", "t2"]
        assert "channelId" not in body[0]
        assert [t.token for t in tickets] == ["t1", "t2"]
        assert all(t.ok for t in tickets)

    async def test_channel_id_serialized_in_camel_case(self):
        message = PushMessage(to="t1", title="T", body="B", channel_id="default")

        assert message.to_gateway()["channelId"] == "default"

    async def test_access_token_header(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [{"status": "ok"}]})

        await _client(handler, access_token="secret").send_batch(_messages("t1"))

        assert seen[0].headers["Authorization"] == "Bearer secret"

    async def test_empty_batch_makes_no_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await _client(handler).send_batch([]) == []

    async def test_missing_tickets_count_as_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [{"status": "ok"}]})

        tickets = await _client(handler).send_batch(_messages("t1", "t2"))

        assert tickets[0].ok is True
        assert tickets[1].ok is False

    async def test_per_token_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [
                {"status": "error", "message": "DeviceNotRegistered"},
                {"status": "ok", "id": "b"},
            ]})

        tickets = await _client(handler).send_batch(_messages("t1", "t2"))

        assert tickets[0].ok is False
        assert tickets[0].message == "DeviceNotRegistered"
        assert tickets[1].ok is True

    async def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        with pytest.raises(PushGatewayException):
            await _client(handler).send_batch(_messages("t1"))

    async def test_request_level_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"errors": [{"code": "VALIDATION_ERROR"}]})

        with pytest.raises(PushGatewayException):
            await _client(handler).send_batch(_messages("t1"))

    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(PushGatewayException):
            await _client(handler).send_batch(_messages("t1"))
