"""
Mock ShardDog server providing the channel and mint receipt endpoints.
"""

import secrets
import uuid
from typing import Dict, Any, List

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.logging import get_logger


class MockShardDogServer:
    """Mock ShardDog treat API implementation."""

    def __init__(self, port: int = 3001):
        self.port = port
        self.logger = get_logger("mock.sharddog")
        self.app = FastAPI(title="Mock ShardDog", version="1.0.0")

        # channel_id -> channel record
        self.channels: Dict[str, Dict[str, Any]] = {
            "abc123": {
                "title": "Seed Channel",
                "apiKey": "xyz789",
                "owner": "seed.near",
            }
        }
        self.mints: List[Dict[str, Any]] = []

        self._setup_routes()

    def _setup_routes(self):
        """Set up mock ShardDog routes."""

        @self.app.post("/api/receipts/channels")
        async def create_channel(body: Dict[str, Any]):
            """Create a channel and issue its API key."""
            channel_id = uuid.uuid4().hex[:12]
            api_key = secrets.token_hex(16)
            self.channels[channel_id] = {
                "title": body.get("title"),
                "apiKey": api_key,
                "owner": body.get("wallet"),
            }
            self.logger.info("Mock channel created", channel_id=channel_id)
            return {"channelId": channel_id, "apiKey": api_key}

        @self.app.post("/api/receipts/mint/{channel_id}")
        async def mint(channel_id: str, body: Dict[str, Any], x_api_key: str = Header(default="")):
            """Mint a receipt to receiverId."""
            channel = self.channels.get(channel_id)
            if channel is None:
                return JSONResponse(status_code=404, content={"message": "Channel not found"})

            if x_api_key != channel["apiKey"]:
                return JSONResponse(status_code=401, content={"message": "bad key"})

            receiver_id = body.get("receiverId")
            if not receiver_id:
                return PlainTextResponse("receiverId required", status_code=400)

            tx_id = uuid.uuid4().hex
            self.mints.append({"channelId": channel_id, "receiverId": receiver_id, "txId": tx_id})
            self.logger.info("Mock treat minted", channel_id=channel_id, receiver_id=receiver_id)
            return {"txId": tx_id, "receiverId": receiver_id}

    def run(self):
        """Run the mock server."""
        import uvicorn
        uvicorn.run(self.app, host="0.0.0.0", port=self.port)


def create_app():
    """Create mock ShardDog application."""
    return MockShardDogServer().app


if __name__ == "__main__":
    MockShardDogServer().run()
