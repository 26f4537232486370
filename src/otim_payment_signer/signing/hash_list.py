"""Ordered signing hash list and signature re-assembly.

The remote signer returns signatures positionally, so the order built here
(authorization first, then completion instructions, then instructions) is the
order the signatures are distributed back in.
"""

import logging
from typing import Any, Dict, List, Mapping, Sequence

from ..exceptions import ExternalCallError
from .signatures import to_compact_signature
from .typed_data import hash_sweep_instruction
from .types import CompactSignature, RawSignature

logger = logging.getLogger(__name__)

INSTRUCTION_GROUPS = ("completionInstructions", "instructions")


def _instruction_groups(
    payment_response: Mapping[str, Any],
) -> List[List[Dict[str, Any]]]:
    return [payment_response.get(key) or [] for key in INSTRUCTION_GROUPS]


def create_signing_hash_list(
    auth_hash: str,
    payment_response: Mapping[str, Any],
    delegate_address: str,
) -> List[str]:
    """Build the ordered list of payloads to sign.

    Args:
        auth_hash: EIP-7702 authorization digest
        payment_response: Payment request build response, holding
            completionInstructions and instructions
        delegate_address: Verifying contract for every instruction digest

    Returns:
        [auth_hash, *completion instruction digests, *instruction digests]
    """
    signing_hashes = [auth_hash]

    for key, group in zip(INSTRUCTION_GROUPS, _instruction_groups(payment_response)):
        logger.info("Processing %d %s...", len(group), key)
        for instruction in group:
            logger.debug("Processing instruction: %s", instruction)
            signing_hashes.append(hash_sweep_instruction(delegate_address, instruction))

    logger.info("Created signing hash list with %d hashes", len(signing_hashes))
    return signing_hashes


def expected_signature_count(payment_response: Mapping[str, Any]) -> int:
    """Number of signatures a build response needs, authorization included."""
    return 1 + sum(len(group) for group in _instruction_groups(payment_response))


def attach_activation_signatures(
    payment_response: Mapping[str, Any],
    signatures: Sequence[RawSignature],
) -> CompactSignature:
    """Distribute signatures back onto their originating instructions.

    The first signature belongs to the authorization; the remaining ones are
    attached in order as ``activationSignature`` on each completion
    instruction, then each instruction. Instruction objects are updated in
    place.

    Args:
        payment_response: Payment request build response
        signatures: Signatures in the order of create_signing_hash_list

    Returns:
        The compact authorization signature

    Raises:
        ExternalCallError: If the number of signatures does not match
    """
    expected = expected_signature_count(payment_response)
    if len(signatures) != expected:
        raise ExternalCallError(
            f"Expected {expected} signatures from signer, got {len(signatures)}"
        )

    compact = [to_compact_signature(signature) for signature in signatures]

    position = 1
    for group in _instruction_groups(payment_response):
        for instruction in group:
            instruction["activationSignature"] = compact[position].to_dict()
            position += 1

    return compact[0]
