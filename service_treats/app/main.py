"""
Treat Gateway service.
"""

from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import InternalError, TreatGatewayException

from .adapters.sharddog_client import ShardDogClient
from .domain.minting import ChannelService, MintingService
from .manifest.plugin import PluginManifestProvider
from .registry.channel_store import ChannelStore, create_channel_store


class TreatGatewayService(BaseService):
    """Treat Gateway service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 channel_store: Optional[ChannelStore] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__("treats", 8000, config)

        self.channel_store = channel_store if channel_store is not None else create_channel_store(self.config)
        self.client = ShardDogClient(
            self.config.resolved_upstream_url,
            timeout=self.config.upstream_timeout,
            create_channel_path=self.config.create_channel_path,
            service_api_key=self.config.upstream_api_key,
            metrics=self.metrics,
            transport=transport,
        )
        self.minting = MintingService(
            self.client,
            channel_store=self.channel_store,
            require_registered_channel=self.config.require_registered_channel,
            metrics=self.metrics,
        )
        self.channels = ChannelService(self.client, channel_store=self.channel_store, metrics=self.metrics)
        self.manifest = PluginManifestProvider(self.config)

        self.logger.info(
            "Treat gateway configured",
            upstream=self.config.resolved_upstream_url,
            channel_store=type(self.channel_store).__name__ if self.channel_store else None,
            require_registered_channel=self.config.require_registered_channel,
        )

        self._setup_treat_routes()
        self.app.state.treat_service = self

    async def startup(self):
        if self.channel_store is not None:
            await self.channel_store.start()

    async def shutdown(self):
        if self.channel_store is not None:
            await self.channel_store.stop()

    async def _check_dependencies(self) -> Dict[str, str]:
        if self.channel_store is None:
            return {}
        healthy = await self.channel_store.health_check()
        return {"channel_store": "ok" if healthy else "error"}

    async def _handle(self, request: Request, operation) -> Any:
        """Run operation on the request body, surfacing anything unexpected as InternalError."""
        try:
            payload = await request.json()
            return await operation(payload)
        except TreatGatewayException:
            raise
        except Exception as e:
            self.logger.error("Request handling error", path=request.url.path, error=str(e), exc_info=True)
            raise InternalError(details=str(e))

    def _setup_treat_routes(self):
        """Set up treat-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "treats",
                "message": "ShardDog Treat Gateway",
                "version": "1.0.0",
                "upstream": self.config.resolved_upstream_url,
            }

        @self.app.get("/api/ai-plugin")
        async def ai_plugin():
            """Plugin manifest for the assistant platform."""
            return self.manifest.get_manifest()

        @self.app.get("/.well-known/ai-plugin.json")
        async def well_known_ai_plugin():
            """Plugin manifest at its well-known location."""
            return self.manifest.get_manifest()

        @self.app.post("/api/tools/mint-treat")
        async def mint_treat(request: Request):
            """Mint a treat to a wallet."""
            return await self._handle(request, self.minting.mint)

        @self.app.post("/api/tools/create-channel")
        async def create_channel(request: Request):
            """Create a treat channel."""
            return await self._handle(request, self.channels.create)


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = TreatGatewayService(config)
    return service.app


if __name__ == "__main__":
    service = TreatGatewayService()
    service.run()
