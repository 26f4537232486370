"""EIP-712 hashing of OTIM SweepERC20 instructions.

Builds the OtimDelegate domain and the Instruction -> SweepERC20 -> Fee
message tree, and hashes them with eth_account's typed-data encoder.
"""

import logging
from typing import Any, Dict, Mapping, TypedDict, Union

from eth_account.messages import encode_typed_data
from eth_utils import ValidationError, is_address, keccak, to_checksum_address

from ..exceptions import EncodingError
from .arguments import decode_sweep_arguments
from .types import (
    Fee,
    Instruction,
    OTIM_DOMAIN_TYPE,
    SWEEP_INSTRUCTION_TYPES,
    SweepERC20,
    SweepERC20Message,
)
from .utils import OTIM_DOMAIN_NAME, OTIM_DOMAIN_SALT, OTIM_DOMAIN_VERSION

logger = logging.getLogger(__name__)


class EIP712Domain(TypedDict):
    """EIP-712 domain of the OtimDelegate contract."""

    name: str
    version: str
    chainId: int
    verifyingContract: str
    salt: bytes


def create_eip712_domain(delegate_address: str, chain_id: int) -> EIP712Domain:
    """Create the EIP-712 domain for the delegate contract.

    Raises:
        EncodingError: If the delegate address is invalid
    """
    if not is_address(delegate_address):
        raise EncodingError(f"Invalid delegate address: {delegate_address}")

    return {
        "name": OTIM_DOMAIN_NAME,
        "version": OTIM_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": to_checksum_address(delegate_address),
        "salt": OTIM_DOMAIN_SALT,
    }


def create_sweep_message(instruction: Instruction) -> SweepERC20Message:
    """Decode an instruction's arguments into its typed message."""
    args = decode_sweep_arguments(instruction.arguments)
    return SweepERC20Message(
        salt=instruction.salt,
        max_executions=instruction.max_executions,
        action=instruction.action,
        sweep_erc20=SweepERC20(
            token=args.token,
            target=args.target,
            threshold=args.threshold,
            end_balance=args.end_balance,
            fee=Fee(
                token=args.fee_token,
                max_base_fee_per_gas=args.max_base_fee_per_gas,
                max_priority_fee_per_gas=args.max_priority_fee_per_gas,
                execution_fee=args.execution_fee,
            ),
        ),
    )


def build_sweep_typed_data(
    delegate_address: str,
    instruction: Union[Instruction, Mapping[str, Any]],
) -> Dict[str, Any]:
    """Build the full EIP-712 typed data for a sweep instruction.

    Args:
        delegate_address: OtimDelegate contract address (verifying contract)
        instruction: Instruction, or the raw instruction object from the API

    Returns:
        Dict with types, primaryType, domain and message
    """
    if not isinstance(instruction, Instruction):
        instruction = Instruction.from_dict(instruction)

    domain = create_eip712_domain(delegate_address, instruction.chain_id)
    message = create_sweep_message(instruction)

    return {
        "types": {
            "EIP712Domain": OTIM_DOMAIN_TYPE,
            **SWEEP_INSTRUCTION_TYPES,
        },
        "primaryType": "Instruction",
        "domain": domain,
        "message": message.to_message(),
    }


def hash_sweep_instruction(
    delegate_address: str,
    instruction: Union[Instruction, Mapping[str, Any]],
) -> str:
    """Compute the EIP-712 digest of a sweep instruction.

    The digest is keccak256(0x19 0x01 || domainSeparator || hashStruct(message)),
    the payload the remote signer signs without further hashing.

    Args:
        delegate_address: OtimDelegate contract address (verifying contract)
        instruction: Instruction, or the raw instruction object from the API

    Returns:
        0x-prefixed 32-byte hex digest

    Raises:
        DecodeError: If the instruction arguments are malformed
        EncodingError: If any other field is missing or malformed
    """
    typed_data = build_sweep_typed_data(delegate_address, instruction)

    try:
        signable = encode_typed_data(full_message=typed_data)
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise EncodingError(f"Could not encode typed data: {e}") from e

    digest = keccak(b"\x19" + signable.version + signable.header + signable.body)
    digest_hex = "0x" + digest.hex()
    logger.info("EIP-712 hash prepared: %s", digest_hex)
    return digest_hex
