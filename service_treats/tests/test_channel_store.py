"""
Tests for channel credential stores.
"""

import json
import pytest
from unittest.mock import AsyncMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_treats.app.registry.channel_store import (
    ChannelCredential, InMemoryChannelStore, RedisChannelStore, create_channel_store,
)
from shared.errors import InternalError
from shared.test_helpers import create_test_config


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestInMemoryChannelStore:

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def store(self, clock):
        return InMemoryChannelStore(ttl_seconds=60, clock=clock)

    @pytest.mark.asyncio
    async def test_put_and_get(self, store):
        await store.put("chan-1", ChannelCredential(api_key="key-1"))

        credential = await store.get("chan-1")

        assert credential.api_key == "key-1"
        assert await store.get("chan-2") is None

    @pytest.mark.asyncio
    async def test_entries_expire(self, store, clock):
        await store.put("chan-1", ChannelCredential(api_key="key-1"))

        clock.now += 61

        assert await store.get("chan-1") is None
        assert "chan-1" not in store._entries

    @pytest.mark.asyncio
    async def test_put_evicts_expired(self, store, clock):
        await store.put("old", ChannelCredential(api_key="k"))
        clock.now += 120
        await store.put("new", ChannelCredential(api_key="k"))

        assert list(store._entries) == ["new"]


class TestRedisChannelStore:

    @pytest.fixture
    def store(self):
        store = RedisChannelStore("redis://localhost:6379/0", ttl_seconds=300)
        store.redis = AsyncMock()
        return store

    @pytest.mark.asyncio
    async def test_put_uses_ttl(self, store):
        await store.put("chan-1", ChannelCredential(api_key="key-1", created_at=5.0))

        store.redis.setex.assert_awaited_once_with(
            "treats:channel:chan-1",
            300,
            json.dumps({"apiKey": "key-1", "createdAt": 5.0}),
        )

    @pytest.mark.asyncio
    async def test_get(self, store):
        store.redis.get.return_value = json.dumps({"apiKey": "key-1", "createdAt": 5.0})

        credential = await store.get("chan-1")

        assert credential == ChannelCredential(api_key="key-1", created_at=5.0)
        store.redis.get.assert_awaited_once_with("treats:channel:chan-1")

    @pytest.mark.asyncio
    async def test_get_miss(self, store):
        store.redis.get.return_value = None
        assert await store.get("chan-1") is None

    @pytest.mark.asyncio
    async def test_health_check_failure(self, store):
        store.redis.ping.side_effect = ConnectionError("down")
        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_not_started(self):
        store = RedisChannelStore("redis://localhost:6379/0", ttl_seconds=300)
        with pytest.raises(InternalError) as exc_info:
            await store.get("chan-1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.to_content() == {
            "error": "Internal server error",
            "details": "Channel store is not started",
        }


class TestCreateChannelStore:

    def test_kinds(self):
        assert isinstance(create_channel_store(create_test_config(channel_store="memory")), InMemoryChannelStore)
        assert isinstance(create_channel_store(create_test_config(channel_store="redis")), RedisChannelStore)
        assert create_channel_store(create_test_config(channel_store="none")) is None

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            create_channel_store(create_test_config(channel_store="sqlite"))
