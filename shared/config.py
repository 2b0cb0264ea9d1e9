"""
Shared configuration management for the ShardDog Treat Gateway.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEVELOPMENT_UPSTREAM_URL = "http://localhost:3001"
PRODUCTION_UPSTREAM_URL = "https://sharddog.ai"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TREATS_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="production", validation_alias=AliasChoices("TREATS_ENV", "NODE_ENV"))
    log_level: str = "info"

    # Upstream treat API
    upstream_base_url: Optional[str] = None
    development_upstream_url: str = DEVELOPMENT_UPSTREAM_URL
    production_upstream_url: str = PRODUCTION_UPSTREAM_URL
    upstream_timeout: Optional[float] = None
    upstream_api_key: Optional[str] = None
    create_channel_path: str = "/api/receipts/channels"

    # Plugin manifest
    service_url: str = "https://sharddog-agent-bitte.vercel.app"
    bitte_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("BITTE_KEY", "TREATS_BITTE_KEY"))
    bitte_config: Optional[str] = Field(default=None, validation_alias=AliasChoices("BITTE_CONFIG", "TREATS_BITTE_CONFIG"))

    # Channel credential store
    channel_store: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    channel_ttl_seconds: int = 86400
    require_registered_channel: bool = False

    # HTTP
    cors_origins: List[str] = ["*"]

    # Observability
    enable_tracing: bool = False
    otel_exporter: str = "http://localhost:4317"
    enable_console_tracing: bool = False

    @property
    def is_development(self) -> bool:
        return self.env.lower() == "development"

    @property
    def resolved_upstream_url(self) -> str:
        """Upstream base URL, explicit override first, then by deployment mode."""
        if self.upstream_base_url:
            url = self.upstream_base_url
        elif self.is_development:
            url = self.development_upstream_url
        else:
            url = self.production_upstream_url
        return url.rstrip("/")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)


def load_json_blob(raw: Optional[str], name: str, logger) -> Dict[str, Any]:
    """Parse a JSON-encoded environment value into a dict.

    Missing, malformed or non-object values degrade to an empty dict; the
    problem is logged so that a misconfigured deployment is visible.
    """
    if not raw:
        logger.warning("Environment value not set", variable=name)
        return {}

    try:
        value = json.loads(raw)
    except ValueError as e:
        logger.error("Environment value is not valid JSON", variable=name, error=str(e))
        return {}

    if not isinstance(value, dict):
        logger.error(
            "Environment value is not a JSON object",
            variable=name,
            value_type=type(value).__name__,
        )
        return {}

    return value
