"""
Push gateway client.

Talks to an Expo-compatible push service: one HTTP POST carries a JSON
array of messages and the response holds one delivery ticket per
message, in request order. Delivery itself is the gateway's job; this
client only submits batches and reports per-token outcomes.
"""
import logging
from typing import List, Optional

import httpx

from app.config import settings
from app.schemas.notification import PushMessage, PushTicket

logger = logging.getLogger(__name__)


class PushGatewayException(Exception):
    """Raised when the push gateway cannot be reached or rejects the whole batch."""
    pass


class PushGatewayClient:
    """
    Client for the external push-delivery gateway.

    A new client is cheap to build; the fan-out service creates one per
    invocation so nothing is shared between concurrent invocations.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize push gateway client.

        Args:
            url: Batch send endpoint (defaults to settings.push_gateway_url)
            timeout: Request timeout in seconds
            access_token: Optional bearer token for the gateway
            transport: Optional httpx transport (used by tests)
        """
        self.url = url or settings.push_gateway_url
        self.timeout = timeout if timeout is not None else settings.push_gateway_timeout
        self.access_token = access_token if access_token is not None else settings.push_gateway_access_token
        self.transport = transport

    def _get_headers(self) -> dict:
        """Get default headers for gateway requests."""
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def send_batch(self, messages: List[PushMessage]) -> List[PushTicket]:
        """
        Submit all messages in a single request.

        Args:
            messages: Push messages, one per device token

        Returns:
            One ticket per message, in the same order. Tokens the gateway
            did not acknowledge get an error ticket so callers can count
            them as failed without affecting the others.

        Raises:
            PushGatewayException: Network failure, non-2xx status, or a
                request-level error from the gateway
        """
        if not messages:
            return []

        payload = [message.to_gateway() for message in messages]

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload, headers=self._get_headers())
        except httpx.HTTPError as e:
            raise PushGatewayException(f"Push gateway request failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            raise PushGatewayException(
                f"Push gateway returned status {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PushGatewayException("Push gateway returned a non-JSON body") from e

        raw_tickets = body.get("data") if isinstance(body, dict) else None
        if raw_tickets is None:
            errors = body.get("errors") if isinstance(body, dict) else None
            raise PushGatewayException(f"Push gateway rejected the batch: {errors}")

        if isinstance(raw_tickets, dict):
            raw_tickets = [raw_tickets]

        tickets: List[PushTicket] = []
        for index, message in enumerate(messages):
            if index < len(raw_tickets):
                raw = raw_tickets[index] or {}
                tickets.append(
                    PushTicket(
                        token=message.to,
                        status=raw.get("status", "error"),
                        id=raw.get("id"),
                        message=raw.get("message"),
                        details=raw.get("details"),
                    )
                )
            else:
                tickets.append(
                    PushTicket(token=message.to, status="error", message="No ticket returned")
                )

        failed = [t for t in tickets if not t.ok]
        if failed:
            logger.warning(
                f"Push gateway reported {len(failed)}/{len(tickets)} failed tokens: "
                f"{[t.message for t in failed][:5]}"
            )

        return tickets
