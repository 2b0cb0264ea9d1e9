"""
Adapters package for the Treat Gateway.

Contains the HTTP client for the upstream ShardDog treat API. The adapter
owns the base URL, request shapes and the translation of upstream failures
into UpstreamError.
"""

from .sharddog_client import ShardDogClient

__all__ = [
    "ShardDogClient",
]
