"""Decoding of ABI-encoded SweepERC20 action arguments."""

import binascii
import logging
from typing import Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, to_checksum_address

from ..exceptions import DecodeError
from .types import SweepArguments

logger = logging.getLogger(__name__)

WORD_SIZE = 32

# (field, ABI type), one 32-byte word each, in encoding order
SWEEP_ARGUMENT_LAYOUT = (
    ("token", "address"),
    ("target", "address"),
    ("threshold", "uint256"),
    ("end_balance", "uint256"),
    ("fee_token", "address"),
    ("max_base_fee_per_gas", "uint256"),
    ("max_priority_fee_per_gas", "uint256"),
    ("execution_fee", "uint256"),
)

SWEEP_ARGUMENTS_LENGTH = WORD_SIZE * len(SWEEP_ARGUMENT_LAYOUT)


def decode_sweep_arguments(arguments: Union[str, bytes]) -> SweepArguments:
    """Decode the eight fixed-width fields of a SweepERC20 argument blob.

    Args:
        arguments: ABI-encoded arguments, as bytes or a hex string with or
            without 0x prefix

    Returns:
        SweepArguments with checksummed addresses and integer amounts

    Raises:
        DecodeError: If the blob is not hex, has the wrong length, or a word
            does not decode as its declared type
    """
    if isinstance(arguments, str):
        try:
            data = decode_hex(arguments)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Arguments are not valid hex: {e}") from e
    elif isinstance(arguments, (bytes, bytearray)):
        data = bytes(arguments)
    else:
        raise DecodeError(f"Arguments must be hex or bytes, got {type(arguments).__name__}")

    if len(data) != SWEEP_ARGUMENTS_LENGTH:
        raise DecodeError(
            f"Expected {SWEEP_ARGUMENTS_LENGTH} bytes of arguments, got {len(data)}"
        )

    names = [name for name, _ in SWEEP_ARGUMENT_LAYOUT]
    types = [abi_type for _, abi_type in SWEEP_ARGUMENT_LAYOUT]
    try:
        values = decode(types, data)
    except DecodingError as e:
        raise DecodeError(f"Could not decode arguments: {e}") from e

    fields = {}
    for name, abi_type, value in zip(names, types, values):
        fields[name] = to_checksum_address(value) if abi_type == "address" else value

    decoded = SweepArguments(**fields)
    logger.debug("Decoded sweep arguments: %s", decoded)
    return decoded
