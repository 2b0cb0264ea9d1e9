"""
NEAR wallet helpers.
"""

from typing import Any, Optional

WALLET_SUFFIXES = (".near", ".testnet")
DEFAULT_WALLET_SUFFIX = ".near"


def normalize_wallet(wallet: str) -> str:
    """Append the default network suffix unless a recognized one is present."""
    if wallet.endswith(WALLET_SUFFIXES):
        return wallet
    return f"{wallet}{DEFAULT_WALLET_SUFFIX}"


def present(value: Any) -> Optional[str]:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def resolve_target_wallet(receiver_id: Any, wallet: Any) -> Optional[str]:
    """receiverId wins over wallet when both are supplied."""
    return present(receiver_id) or present(wallet)
