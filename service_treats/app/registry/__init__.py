"""
Channel credential registry for the Treat Gateway.
"""

from .channel_store import (
    ChannelCredential,
    ChannelStore,
    InMemoryChannelStore,
    RedisChannelStore,
    create_channel_store,
)

__all__ = [
    "ChannelCredential",
    "ChannelStore",
    "InMemoryChannelStore",
    "RedisChannelStore",
    "create_channel_store",
]
