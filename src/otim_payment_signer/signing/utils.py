"""Constants and small helpers for OTIM instruction signing."""

import string
from typing import Union

from eth_utils import keccak

# USDC on Base
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

# EIP-712 domain of the OtimDelegate contract
OTIM_DOMAIN_NAME = "OtimDelegate"
OTIM_DOMAIN_VERSION = "1"
OTIM_DOMAIN_SALT = keccak(text="ON_TIME_INSTRUCTED_MONEY")

# EIP-7702 authorization magic prefix
SET_CODE_AUTHORIZATION_MAGIC = b"\x05"


def parse_uint(value: Union[int, str]) -> int:
    """Parse an unsigned integer from an int, decimal string or 0x hex string.

    Raises:
        ValueError: If the value is negative, not an integer, or unparseable
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid unsigned integer: {value!r}")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            result = int(text, 16) if len(text) > 2 else 0
        else:
            result = int(text, 10)
    else:
        raise ValueError(f"Invalid unsigned integer: {value!r}")

    if result < 0 or result >= 2**256:
        raise ValueError(f"Unsigned integer out of range: {value!r}")
    return result


def _parse_hex(value: str) -> int:
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text or any(c not in string.hexdigits for c in text):
        raise ValueError(f"Invalid hex value: {value!r}")
    return int(text, 16)


def parse_hex_word(value: Union[int, str]) -> int:
    """Parse a 32-byte word given as an int or a hex string (0x optional).

    Raises:
        ValueError: If the value is not hex or does not fit in 32 bytes
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Invalid 32-byte word: {value!r}")
    result = value if isinstance(value, int) else _parse_hex(value)
    if result < 0 or result >= 2**256:
        raise ValueError(f"Value does not fit in 32 bytes: {value!r}")
    return result


def parse_recovery_id(v: Union[int, str]) -> int:
    """Parse a recovery id given as an int or a hex string ("1b", "0x1c").

    Raises:
        ValueError: If the value is negative or not hex
    """
    if isinstance(v, bool) or not isinstance(v, (int, str)):
        raise ValueError(f"Invalid recovery id: {v!r}")
    result = v if isinstance(v, int) else _parse_hex(v)
    if result < 0:
        raise ValueError(f"Invalid recovery id: {v!r}")
    return result


def to_hex32(value: Union[int, str]) -> str:
    """Render a 32-byte word as a 0x-prefixed, 64-digit lowercase hex string.

    Raises:
        ValueError: If the value is not hex or does not fit in 32 bytes
    """
    return "0x" + format(parse_hex_word(value), "064x")
