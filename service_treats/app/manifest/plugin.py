"""
Plugin manifest advertised to the Bitte assistant platform.

The document is built once from configuration when the service starts and
served unchanged for the lifetime of the process.
"""

import copy
from typing import Any, Dict

from shared.config import BaseConfig, load_json_blob
from shared.logging import get_logger
from .validation import validate_manifest


ASSISTANT_INSTRUCTIONS = """You are a helpful assistant that manages ShardDog treats.
You can help users create treat channels and mint treats to wallets.

Important Channel Creation Workflow:
1. When you create a channel, you'll receive a channelId and apiKey
2. You MUST remember and store these credentials
3. When minting treats later, you MUST provide both the channelId AND apiKey

When creating a channel, ensure all parameters are properly formatted:
1. Title: Simple text string (avoid special characters if possible)
2. Description: Simple text string (avoid special characters if possible)
3. MediaUrl: Must be complete URL starting with http:// or https://, this is the image for the channel, always give them the option to upload an image first using https://sharddog.ai/uploader in a new tab so they can have a URL to use for the media.
4. Reference: Must be valid JSON - either stringify an object or pass an object
5. Wallet (optional): NEAR account name (will add .near if missing)

When minting treats:
1. You MUST provide both the channelId AND apiKey from channel creation
2. Provide either receiverId or wallet (will be formatted with .near if needed)

Example workflow:
1. Create channel:
   Response: { "channelId": "abc123", "apiKey": "xyz789" }
   Remember these credentials!
2. Mint treat using those credentials:
   Request: {
     "channelId": "abc123",
     "apiKey": "xyz789",
     "receiverId": "user.near"
   }

Always validate:
- All required fields are present
- MediaUrl starts with http:// or https://
- Reference is valid JSON
- Wallet has .near suffix or add it

Use the appropriate endpoints:
- /api/tools/create-channel: To create a new treat channel
- /api/tools/mint-treat: To mint treats to wallets"""

CREATE_CHANNEL_DESCRIPTION = """Creates a new ShardDog treat channel. Required format:
1. Title: A name for your channel
2. Description: What the channel is about
3. MediaUrl: A valid http/https URL to an image
4. Reference: Must be valid JSON (e.g., {"key": "value"} or "{\\"key\\": \\"value\\"}")
5. Wallet (optional): NEAR wallet address (e.g., "example.near")

Example: Create a channel with title="My Channel", description="A test channel", mediaUrl="https://example.com/image.png", reference={"type": "test"}
Also offer the option to upload an image first using https://sharddog.ai/uploader in a new tab so they can have a URL to use for the media."""


def _error_schema(example: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "error": {"type": "string", "example": example},
            "details": {"description": "Upstream error body, or {\"raw\": text} when it is not JSON"},
        },
    }


def _json_content(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"application/json": {"schema": schema}}


def _create_channel_path() -> Dict[str, Any]:
    return {
        "post": {
            "summary": "Create a ShardDog treat channel",
            "description": CREATE_CHANNEL_DESCRIPTION,
            "operationId": "createChannel",
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {
                        "schema": {
                            "type": "object",
                            "required": ["title", "description", "mediaUrl", "reference"],
                            "properties": {
                                "title": {
                                    "type": "string",
                                    "description": "Name of your channel",
                                    "example": "My Test Channel",
                                },
                                "description": {
                                    "type": "string",
                                    "description": "Description of what your channel is about",
                                    "example": "A channel for testing ShardDog treats",
                                },
                                "mediaUrl": {
                                    "type": "string",
                                    "description": "Full URL to image for the channel (must start with http:// or https://)",
                                    "example": "https://example.com/image.png",
                                },
                                "reference": {
                                    "type": "string",
                                    "description": "Must be valid JSON string. Examples:\n"
                                                   "- Simple: \"{\\\"type\\\": \\\"test\\\"}\"\n"
                                                   "- Object: {\"key\": \"value\"}",
                                    "example": "{\"type\": \"test\"}",
                                },
                                "wallet": {
                                    "type": "string",
                                    "description": "NEAR wallet address (optional). Will be suffixed with .near if needed",
                                    "example": "example.near",
                                },
                            },
                        },
                        "examples": {
                            "simple": {
                                "value": {
                                    "title": "Test Channel",
                                    "description": "A test channel for ShardDog",
                                    "mediaUrl": "https://example.com/image.png",
                                    "reference": "{\"type\": \"test\"}",
                                    "wallet": "test.near",
                                }
                            }
                        },
                    }
                },
            },
            "responses": {
                "200": {
                    "description": "Channel created successfully",
                    "content": _json_content({
                        "type": "object",
                        "properties": {
                            "channelId": {"type": "string"},
                            "apiKey": {"type": "string"},
                        },
                    }),
                },
                "400": {
                    "description": "Wallet input required",
                    "content": _json_content({
                        "type": "object",
                        "properties": {
                            "error": {"type": "string", "example": "Wallet address required"},
                            "code": {"type": "string", "example": "WALLET_INPUT_REQUIRED"},
                            "message": {"type": "string", "example": "Please provide your NEAR wallet address"},
                        },
                    }),
                },
            },
        }
    }


def _mint_treat_path() -> Dict[str, Any]:
    return {
        "post": {
            "summary": "Mint a ShardDog treat",
            "description": "Mints a treat to the specified wallet",
            "operationId": "mintTreat",
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {
                        "schema": {
                            "type": "object",
                            "required": ["channelId", "apiKey"],
                            "properties": {
                                "channelId": {
                                    "type": "string",
                                    "description": "Channel ID from channel creation",
                                },
                                "apiKey": {
                                    "type": "string",
                                    "description": "API Key received during channel creation",
                                },
                                "receiverId": {
                                    "type": "string",
                                    "description": "Receiver's wallet address (will add .near if missing)",
                                },
                                "wallet": {
                                    "type": "string",
                                    "description": "Alternative to receiverId - wallet address",
                                },
                            },
                        },
                        "examples": {
                            "using-receiver-id": {
                                "value": {
                                    "channelId": "abc123",
                                    "apiKey": "xyz789",
                                    "receiverId": "user.near",
                                }
                            }
                        },
                    }
                },
            },
            "responses": {
                "200": {
                    "description": "Treat minted successfully",
                    "content": _json_content({
                        "type": "object",
                        "properties": {
                            "txId": {"type": "string", "description": "Transaction ID"},
                        },
                    }),
                },
                "400": {
                    "description": "Missing required fields",
                    "content": _json_content(_error_schema(
                        "Missing required fields. Need channelId, apiKey and either receiverId or wallet"
                    )),
                },
                "500": {
                    "description": "Unexpected failure",
                    "content": _json_content(_error_schema("Internal server error")),
                },
            },
        }
    }


def build_manifest(account_id: str, service_url: str) -> Dict[str, Any]:
    """Assemble the manifest document for the given identity and base URL."""
    service_url = service_url.rstrip("/")
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "ShardDog Treat Maker (testnet)",
            "description": "API for managing ShardDog treats - create channels and mint treats (testnet)",
            "version": "1.0.0",
        },
        "servers": [{"url": service_url}],
        "x-mb": {
            "account-id": account_id,
            "assistant": {
                "name": "ShardDog Assistant (testnet)",
                "description": "An assistant that helps manage ShardDog treats, create channels, and mint treats to wallets",
                "instructions": ASSISTANT_INSTRUCTIONS,
                "tools": [{"type": "generate-transaction"}],
                "version": "1.0.0",
                "image": f"{service_url}/sharddog.png",
            },
        },
        "paths": {
            "/api/tools/create-channel": _create_channel_path(),
            "/api/tools/mint-treat": _mint_treat_path(),
        },
    }


class PluginManifestProvider:
    """Reads identity and configuration once, then serves a fixed document."""

    def __init__(self, config: BaseConfig):
        self.logger = get_logger("treats.manifest")

        key = load_json_blob(config.bitte_key, "BITTE_KEY", self.logger)
        bitte_config = load_json_blob(config.bitte_config, "BITTE_CONFIG", self.logger)

        account_id = key.get("accountId")
        if not isinstance(account_id, str) or not account_id:
            self.logger.error("no account")
            account_id = ""

        service_url = bitte_config.get("url")
        if not isinstance(service_url, str) or not service_url:
            service_url = config.service_url

        self.account_id = account_id
        self._manifest = build_manifest(account_id, service_url)

        for problem in validate_manifest(self._manifest):
            self.logger.warning("Plugin manifest problem", problem=problem)

    def get_manifest(self) -> Dict[str, Any]:
        """Return a copy of the manifest so callers cannot alter the snapshot."""
        return copy.deepcopy(self._manifest)
