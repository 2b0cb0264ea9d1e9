"""
Channel credential stores.

Credentials returned by the upstream when a channel is created are kept here
so that the registered-channel gate on minting can recognise the channel.
Every entry expires after a configured TTL.
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import redis.asyncio as redis

from shared.logging import get_logger
from shared.errors import InternalError, TreatGatewayException


@dataclass
class ChannelCredential:
    """API key issued for a channel."""

    api_key: str
    created_at: float = field(default_factory=time.time)


class ChannelStore(ABC):
    """Keyed by channel ID, entries live for ttl_seconds."""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    async def start(self):
        """Open connections."""

    async def stop(self):
        """Close connections."""

    @abstractmethod
    async def get(self, channel_id: str) -> Optional[ChannelCredential]:
        ...

    @abstractmethod
    async def put(self, channel_id: str, credential: ChannelCredential) -> None:
        ...

    async def health_check(self) -> bool:
        return True


class InMemoryChannelStore(ChannelStore):
    """Process-local store; only suitable for a single instance."""

    def __init__(self, ttl_seconds: int, clock=time.monotonic):
        super().__init__(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, Tuple[float, ChannelCredential]] = {}
        self.logger = get_logger("treats.registry.memory")

    async def get(self, channel_id: str) -> Optional[ChannelCredential]:
        entry = self._entries.get(channel_id)
        if entry is None:
            return None

        expires_at, credential = entry
        if expires_at <= self._clock():
            del self._entries[channel_id]
            self.logger.debug("Channel credential expired", channel_id=channel_id)
            return None

        return credential

    async def put(self, channel_id: str, credential: ChannelCredential) -> None:
        self._evict_expired()
        self._entries[channel_id] = (self._clock() + self.ttl_seconds, credential)

    def _evict_expired(self):
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]


class RedisChannelStore(ChannelStore):
    """Redis-backed store shared by every gateway instance."""

    CHANNEL_PREFIX = "treats:channel:"

    def __init__(self, redis_url: str, ttl_seconds: int):
        super().__init__(ttl_seconds)
        self.redis_url = redis_url
        self.redis: Optional[redis.Redis] = None
        self.logger = get_logger("treats.registry.redis")

    async def start(self):
        """Start the Redis connection."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )
            await self.redis.ping()
            self.logger.info("Redis channel store started")

        except Exception as e:
            self.logger.error("Failed to start Redis channel store", error=str(e))
            raise TreatGatewayException("REDIS_START_FAILED", str(e), status_code=500)

    async def stop(self):
        """Stop the Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis channel store stopped")

    async def get(self, channel_id: str) -> Optional[ChannelCredential]:
        data = await self._client().get(self._key(channel_id))
        if not data:
            return None

        payload = json.loads(data)
        return ChannelCredential(api_key=payload["apiKey"], created_at=payload.get("createdAt", 0.0))

    async def put(self, channel_id: str, credential: ChannelCredential) -> None:
        await self._client().setex(
            self._key(channel_id),
            self.ttl_seconds,
            json.dumps({"apiKey": credential.api_key, "createdAt": credential.created_at})
        )

    async def health_check(self) -> bool:
        try:
            await self._client().ping()
            return True
        except Exception:
            return False

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise InternalError(details="Channel store is not started")
        return self.redis

    def _key(self, channel_id: str) -> str:
        return f"{self.CHANNEL_PREFIX}{channel_id}"


def create_channel_store(config) -> Optional[ChannelStore]:
    """Build the store selected by configuration, or None when disabled."""
    kind = config.channel_store.lower()
    if kind == "memory":
        return InMemoryChannelStore(config.channel_ttl_seconds)
    if kind == "redis":
        return RedisChannelStore(config.redis_url, config.channel_ttl_seconds)
    if kind == "none":
        return None
    raise ValueError(f"Unknown channel store: {config.channel_store}")
