"""Conversion of raw signer output into flat and EIP-2098 compact forms."""

from typing import Tuple, Union

from eth_utils import remove_0x_prefix

from .types import CompactSignature, RawSignature
from .utils import parse_recovery_id, to_hex32


def normalize_y_parity(v: Union[int, str]) -> int:
    """Map a recovery id onto its y parity.

    0/1 pass through, 27/28 map to 0/1. Anything else is treated as an
    EIP-155 style value (chain_id * 2 + 35 + y_parity): even -> 1, odd -> 0.
    """
    v = parse_recovery_id(v)
    if v in (0, 1):
        return v
    if v in (27, 28):
        return v - 27
    return 1 if v % 2 == 0 else 0


def to_flat_signature(signature: RawSignature) -> str:
    """Concatenate r || s || v into a single 0x-prefixed hex signature."""
    v = parse_recovery_id(signature.v)
    return (
        to_hex32(signature.r)
        + remove_0x_prefix(to_hex32(signature.s))
        + format(v, "02x")
    )


def to_compact_signature(signature: RawSignature) -> CompactSignature:
    """Convert a raw signature into its EIP-2098 (yParity, r, s) form."""
    return CompactSignature(
        y_parity=normalize_y_parity(signature.v),
        r=to_hex32(signature.r),
        s=to_hex32(signature.s),
    )


def split_raw_signature(signature: RawSignature) -> Tuple[str, CompactSignature]:
    """Return both the flat and the compact form of a raw signature."""
    return to_flat_signature(signature), to_compact_signature(signature)
