"""
Treat minting and channel creation flows.
"""

from typing import Any, Dict, Optional

from shared.logging import get_logger, set_channel_context
from shared.errors import InvalidChannelError, TreatGatewayException
from ..adapters.sharddog_client import ShardDogClient
from ..registry.channel_store import ChannelCredential, ChannelStore
from .models import CreateChannelRequest, MintRequest


class MintingService:
    """Validates, optionally gates on the channel registry, then forwards."""

    def __init__(self, client: ShardDogClient, channel_store: Optional[ChannelStore] = None,
                 require_registered_channel: bool = False, metrics=None):
        if require_registered_channel and channel_store is None:
            raise ValueError("require_registered_channel needs a channel store")

        self.client = client
        self.channel_store = channel_store
        self.require_registered_channel = require_registered_channel
        self.metrics = metrics
        self.logger = get_logger("treats.minting")

    async def mint(self, payload: Any) -> Dict[str, Any]:
        try:
            request = MintRequest.from_payload(payload)
            set_channel_context(request.channel_id)

            self.logger.info(
                "Received mint request",
                channel_id=request.channel_id,
                target_wallet=request.target_wallet,
            )

            if self.require_registered_channel:
                await self._check_registered(request)

            result = await self.client.mint_treat(request.channel_id, request.api_key, request.receiver_id)
        except TreatGatewayException as e:
            self._count(e.code.lower())
            raise

        self._count("minted")
        return result

    async def _check_registered(self, request: MintRequest):
        credential = await self.channel_store.get(request.channel_id)
        if credential is None:
            self.logger.warning("Mint for unregistered channel", channel_id=request.channel_id)
            raise InvalidChannelError(request.channel_id)

        if credential.api_key != request.api_key:
            # TODO: decide with the upstream owners whether a mismatch should reject the mint
            self.logger.warning("Supplied API key differs from registered key", channel_id=request.channel_id)

    def _count(self, outcome: str):
        if self.metrics is not None:
            self.metrics.increment_counter("treats_minted_total", outcome=outcome)


class ChannelService:
    """Creates channels upstream and records the issued credentials."""

    def __init__(self, client: ShardDogClient, channel_store: Optional[ChannelStore] = None, metrics=None):
        self.client = client
        self.channel_store = channel_store
        self.metrics = metrics
        self.logger = get_logger("treats.channels")

    async def create(self, payload: Any) -> Dict[str, Any]:
        try:
            request = CreateChannelRequest.from_payload(payload)
            result = await self.client.create_channel(request.to_upstream())
        except TreatGatewayException as e:
            self._count(e.code.lower())
            raise

        self._count("created" if await self._remember(result) else "store_failed")
        return result

    async def _remember(self, result: Any) -> bool:
        """Record issued credentials; False only when the store write failed."""
        if self.channel_store is None or not isinstance(result, dict):
            return True

        channel_id = result.get("channelId")
        api_key = result.get("apiKey")
        if not channel_id or not api_key:
            self.logger.warning("Channel created without credentials in response")
            return True

        # The channel already exists upstream, so the caller must still get its credentials.
        try:
            await self.channel_store.put(str(channel_id), ChannelCredential(api_key=str(api_key)))
        except Exception as e:
            self.logger.error("Failed to register channel credentials", channel_id=channel_id,
                              error=str(e), exc_info=True)
            if self.metrics is not None:
                self.metrics.record_error("channel_store_write")
            return False

        self.logger.info("Registered channel credentials", channel_id=channel_id)
        return True

    def _count(self, outcome: str):
        if self.metrics is not None:
            self.metrics.increment_counter("channels_created_total", outcome=outcome)
