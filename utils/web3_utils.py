# utils/web3_utils.py - Address and block helpers
import logging
from typing import Any, Union

from web3 import Web3

logger = logging.getLogger(__name__)


class InvalidWalletAddress(ValueError):
    """Raised for malformed wallet addresses, before any upstream call"""


def is_valid_wallet_address(value: Any) -> bool:
    """EVM address check: lowercase, uppercase or valid checksum"""
    if not isinstance(value, str) or not value:
        return False
    try:
        return Web3.is_address(value.strip())
    except (TypeError, ValueError):
        return False


def validate_wallet_address(value: Any) -> str:
    """Validate and normalize a wallet address to lowercase hex"""
    if not is_valid_wallet_address(value):
        raise InvalidWalletAddress(f"Invalid wallet address: {value}")
    # Canonical 0x-prefixed lowercase form, also for unprefixed input
    return Web3.to_checksum_address(value.strip()).lower()


def parse_hex_int(value: Union[str, int]) -> int:
    """Decode a JSON-RPC quantity (0x-prefixed hex, decimal string or int)"""
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid quantity: {value!r}")
    value = value.strip()
    if value.lower().startswith('0x'):
        return int(value, 16)
    return int(value)


def shorten_address(address: str) -> str:
    """Short form for log lines"""
    if not address or len(address) < 12:
        return address or ''
    return f"{address[:6]}...{address[-4:]}"
