"""
Integration tests for the channel creation and minting flow.

The gateway and the mock ShardDog upstream both run in-process; requests
cross real HTTP request/response handling through httpx ASGI transports.
"""

import pytest
import httpx

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from mocks.sharddog.server import MockShardDogServer
from service_treats.app.main import TreatGatewayService
from shared.test_helpers import TestDataFactory, create_test_config


class TestTreatFlow:
    """Integration tests for the treat gateway against the mock upstream."""

    @pytest.fixture
    def upstream(self):
        """Mock ShardDog server."""
        return MockShardDogServer()

    def _gateway(self, upstream, **config):
        return TreatGatewayService(
            create_test_config(**config),
            transport=httpx.ASGITransport(app=upstream.app),
        )

    def _client(self, gateway):
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=gateway.app), base_url="http://gateway.test")

    @pytest.mark.asyncio
    async def test_mint_with_seed_channel(self, upstream):
        """Wallet is suffixed and the upstream receipt is returned verbatim."""
        gateway = self._gateway(upstream)

        async with self._client(gateway) as client:
            response = await client.post(
                "/api/tools/mint-treat",
                json=TestDataFactory.create_mint_payload(receiverId=None, wallet="alice"),
            )

        assert response.status_code == 200
        data = response.json()
        assert data["receiverId"] == "alice.near"
        assert upstream.mints == [{"channelId": "abc123", "receiverId": "alice.near", "txId": data["txId"]}]

    @pytest.mark.asyncio
    async def test_wrong_key_mirrors_upstream_status(self, upstream):
        gateway = self._gateway(upstream)

        async with self._client(gateway) as client:
            response = await client.post(
                "/api/tools/mint-treat",
                json=TestDataFactory.create_mint_payload(apiKey="wrong"),
            )

        assert response.status_code == 401
        assert response.json() == {"error": "bad key", "details": {"message": "bad key"}}
        assert upstream.mints == []

    @pytest.mark.asyncio
    async def test_unknown_channel_upstream(self, upstream):
        gateway = self._gateway(upstream)

        async with self._client(gateway) as client:
            response = await client.post(
                "/api/tools/mint-treat",
                json=TestDataFactory.create_mint_payload(channelId="missing"),
            )

        assert response.status_code == 404
        assert response.json() == {"error": "Channel not found", "details": {"message": "Channel not found"}}

    @pytest.mark.asyncio
    async def test_create_channel_then_mint_with_registered_gate(self, upstream):
        """Credentials from channel creation unlock minting when the gate is on."""
        gateway = self._gateway(upstream, require_registered_channel=True)

        async with self._client(gateway) as client:
            seed = await client.post("/api/tools/mint-treat", json=TestDataFactory.create_mint_payload())
            assert seed.status_code == 400
            assert seed.json() == {"error": "Invalid channel ID"}

            created = await client.post(
                "/api/tools/create-channel",
                json=TestDataFactory.create_channel_payload(wallet="owner"),
            )
            assert created.status_code == 200
            credentials = created.json()

            minted = await client.post(
                "/api/tools/mint-treat",
                json={
                    "channelId": credentials["channelId"],
                    "apiKey": credentials["apiKey"],
                    "receiverId": "fan.testnet",
                },
            )

        assert minted.status_code == 200
        assert minted.json()["receiverId"] == "fan.testnet"
        assert upstream.channels[credentials["channelId"]]["owner"] == "owner.near"

    @pytest.mark.asyncio
    async def test_upstream_unreachable(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        gateway = TreatGatewayService(create_test_config(), transport=httpx.MockTransport(refuse))

        async with self._client(gateway) as client:
            response = await client.post("/api/tools/mint-treat", json=TestDataFactory.create_mint_payload())

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": "Connection refused"}
