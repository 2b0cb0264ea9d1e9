"""
Test helper functions and factory methods for the ShardDog Treat Gateway.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from shared.config import ServiceConfig


UPSTREAM_URL = "http://sharddog.test"


class TestDataFactory:
    """Factory for creating test data."""

    __test__ = False

    @staticmethod
    def create_test_wallets() -> List[Dict[str, str]]:
        """Wallet inputs paired with the receiverId forwarded upstream."""
        return [
            {"input": "alice", "expected": "alice.near"},
            {"input": "bob.near", "expected": "bob.near"},
            {"input": "carol.testnet", "expected": "carol.testnet"},
            {"input": "dave.near.org", "expected": "dave.near.org.near"},
        ]

    @staticmethod
    def create_mint_payload(**overrides) -> Dict[str, Any]:
        payload = {
            "channelId": "abc123",
            "apiKey": "xyz789",
            "receiverId": "user.near",
        }
        payload.update(overrides)
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def create_channel_payload(**overrides) -> Dict[str, Any]:
        payload = {
            "title": "Test Channel",
            "description": "A test channel for ShardDog",
            "mediaUrl": "https://example.com/image.png",
            "reference": "{\"type\": \"test\"}",
            "wallet": "test.near",
        }
        payload.update(overrides)
        return {key: value for key, value in payload.items() if value is not None}


def create_test_config(**overrides) -> ServiceConfig:
    """Service config pointing at a fake upstream, isolated from the environment."""
    settings = {
        "env": "test",
        "upstream_base_url": UPSTREAM_URL,
        "bitte_key": json.dumps({"accountId": "sharddog.near"}),
        "bitte_config": json.dumps({"url": "https://treats.example.com"}),
        "channel_store": "memory",
        "_env_file": None,
    }
    settings.update(overrides)
    return ServiceConfig(service_name="treats", port=8000, **settings)


def upstream_response(status_code: int = 200, body: Optional[Any] = None, text: Optional[str] = None,
                      url: str = f"{UPSTREAM_URL}/api/receipts/mint/abc123") -> httpx.Response:
    """Build an httpx.Response as returned by the upstream treat API."""
    content = text if text is not None else json.dumps(body if body is not None else {})
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("POST", url),
    )
