"""
ShardDog treat API client for the Treat Gateway.
"""

import json
import httpx
from typing import Any, Dict, Optional

from shared.logging import get_logger
from shared.errors import UpstreamError
from shared.tracing import get_tracer


def parse_error_body(text: str) -> Any:
    """Parse an upstream error body, keeping non-JSON text under "raw"."""
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


def error_message(details: Any, fallback: str) -> str:
    if isinstance(details, dict) and details.get("message"):
        return str(details["message"])
    return fallback


class ShardDogClient:
    """Client for the upstream ShardDog treat API.

    Calls are single-attempt; failures are reported to the caller on the same
    request. The optional transport lets tests and local tooling route calls
    to an in-process app.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 create_channel_path: str = "/api/receipts/channels",
                 service_api_key: Optional[str] = None,
                 metrics=None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.create_channel_path = create_channel_path
        self.service_api_key = service_api_key
        self.metrics = metrics
        self.transport = transport
        self.logger = get_logger("treats.sharddog_client")
        self.tracer = get_tracer(__name__)

    async def mint_treat(self, channel_id: str, api_key: str, receiver_id: str) -> Dict[str, Any]:
        """Mint a treat from channel_id to receiver_id."""
        url = f"{self.base_url}/api/receipts/mint/{channel_id}"
        body = {"receiverId": receiver_id}

        self.logger.info(
            "Making mint request",
            url=url,
            channel_id=channel_id,
            receiver_id=receiver_id,
            has_api_key=bool(api_key)
        )

        return await self._post(
            "mint",
            url,
            body,
            headers={"x-api-key": api_key},
            fallback_message="Minting failed",
            context={"channel_id": channel_id, "receiver_id": receiver_id},
        )

    async def create_channel(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a treat channel; the upstream answers with channelId and apiKey."""
        url = f"{self.base_url}{self.create_channel_path}"
        headers = {}
        if self.service_api_key:
            headers["x-api-key"] = self.service_api_key

        self.logger.info("Making create channel request", url=url, title=payload.get("title"))

        return await self._post(
            "create_channel",
            url,
            payload,
            headers=headers,
            fallback_message="Channel creation failed",
            context={"title": payload.get("title"), "wallet": payload.get("wallet")},
        )

    async def _post(self, operation: str, url: str, body: Dict[str, Any], headers: Dict[str, str],
                    fallback_message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        with self.tracer.start_as_current_span(f"sharddog.{operation}"):
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True,
                                         transport=self.transport) as client:
                if self.metrics is not None:
                    with self.metrics.time_operation("upstream_request_duration_seconds", operation=operation):
                        response = await client.post(url, json=body, headers=headers)
                else:
                    response = await client.post(url, json=body, headers=headers)

        if not response.is_success:
            details = parse_error_body(response.text)
            self.logger.error(
                "Upstream request failed",
                operation=operation,
                status_code=response.status_code,
                reason=response.reason_phrase,
                error=details,
                **context
            )
            raise UpstreamError(response.status_code, error_message(details, fallback_message), details)

        data = response.json()
        self.logger.info("Upstream request succeeded", operation=operation, **context)
        return data
