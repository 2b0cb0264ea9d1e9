"""
Domain package for the Treat Gateway.

Request parsing/validation, wallet normalization and the mint and
create-channel flows that sit between the HTTP routes and the upstream
adapter.
"""

from .minting import ChannelService, MintingService
from .models import CreateChannelRequest, MintRequest
from .wallets import normalize_wallet, resolve_target_wallet

__all__ = [
    "ChannelService",
    "MintingService",
    "CreateChannelRequest",
    "MintRequest",
    "normalize_wallet",
    "resolve_target_wallet",
]
