"""EIP-7702 authorization hashing and signed-authorization encoding."""

import logging

import rlp
from eth_utils import is_address, keccak, to_canonical_address

from ..exceptions import EncodingError
from .types import CompactSignature
from .utils import SET_CODE_AUTHORIZATION_MAGIC

logger = logging.getLogger(__name__)

# EIP-7702 authorizations in this flow are always signed for nonce 0
AUTHORIZATION_NONCE = 0


def _delegate_bytes(delegate_address: str) -> bytes:
    if not is_address(delegate_address):
        raise EncodingError(f"Invalid delegate address: {delegate_address}")
    return to_canonical_address(delegate_address)


def hash_authorization(
    delegate_address: str,
    chain_id: int,
    nonce: int = AUTHORIZATION_NONCE,
) -> str:
    """Compute the EIP-7702 authorization digest.

    digest = keccak256(0x05 || rlp([chain_id, address, nonce]))

    Args:
        delegate_address: Contract the EOA delegates code execution to
        chain_id: Chain id of the authorization (0 authorizes every chain)
        nonce: Authorization nonce

    Returns:
        0x-prefixed 32-byte hex digest
    """
    encoded = rlp.encode([chain_id, _delegate_bytes(delegate_address), nonce])
    digest = "0x" + keccak(SET_CODE_AUTHORIZATION_MAGIC + encoded).hex()
    logger.info("Authorization hash: %s", digest)
    return digest


def encode_signed_authorization(
    delegate_address: str,
    signature: CompactSignature,
    chain_id: int = 0,
    nonce: int = AUTHORIZATION_NONCE,
) -> str:
    """RLP-encode a signed authorization tuple.

    Encodes [chain_id, address, nonce, y_parity, r, s]. Integers are minimal
    big-endian, so zero values (wildcard chain id, nonce 0, y_parity 0)
    encode as empty strings.

    Args:
        delegate_address: Contract the EOA delegates code execution to
        signature: Compact signature over the authorization digest
        chain_id: Chain id the digest was computed with
        nonce: Nonce the digest was computed with

    Returns:
        0x-prefixed hex of the RLP bytes
    """
    encoded = rlp.encode(
        [
            chain_id,
            _delegate_bytes(delegate_address),
            nonce,
            signature.y_parity,
            int(signature.r, 16),
            int(signature.s, 16),
        ]
    )
    return "0x" + encoded.hex()
