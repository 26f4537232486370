"""OTIM Instruction Signing Module.

This module turns OTIM payment instructions into the payloads a remote signer
signs, and turns the signer's output back into what the payments API expects.

Key components:
- ABI decoding of SweepERC20 action arguments
- EIP-712 digests for sweep instructions
- EIP-7702 authorization digest and signed-authorization RLP encoding
- Ordered signing hash list and signature re-assembly

Example usage:
    ```python
    from otim_payment_signer.signing import (
        hash_authorization,
        create_signing_hash_list,
        attach_activation_signatures,
        encode_signed_authorization,
    )

    auth_hash = hash_authorization(delegate_address, chain_id=0)
    hashes = create_signing_hash_list(auth_hash, build_response, delegate_address)

    # ... sign `hashes` remotely, in order ...

    auth_signature = attach_activation_signatures(build_response, signatures)
    signed_authorization = encode_signed_authorization(
        delegate_address, auth_signature
    )
    ```
"""

from .types import (
    Instruction,
    SweepArguments,
    Fee,
    SweepERC20,
    SweepERC20Message,
    RawSignature,
    CompactSignature,
    SWEEP_INSTRUCTION_TYPES,
    OTIM_DOMAIN_TYPE,
)
from .arguments import decode_sweep_arguments, SWEEP_ARGUMENT_LAYOUT
from .typed_data import (
    EIP712Domain,
    create_eip712_domain,
    create_sweep_message,
    build_sweep_typed_data,
    hash_sweep_instruction,
)
from .authorization import (
    AUTHORIZATION_NONCE,
    hash_authorization,
    encode_signed_authorization,
)
from .signatures import (
    normalize_y_parity,
    to_flat_signature,
    to_compact_signature,
    split_raw_signature,
)
from .hash_list import (
    create_signing_hash_list,
    expected_signature_count,
    attach_activation_signatures,
)
from .utils import (
    USDC_BASE,
    OTIM_DOMAIN_SALT,
    parse_uint,
)

__all__ = [
    # Types
    "Instruction",
    "SweepArguments",
    "Fee",
    "SweepERC20",
    "SweepERC20Message",
    "RawSignature",
    "CompactSignature",
    "EIP712Domain",
    "SWEEP_INSTRUCTION_TYPES",
    "OTIM_DOMAIN_TYPE",
    # Decoding
    "decode_sweep_arguments",
    "SWEEP_ARGUMENT_LAYOUT",
    # Hashing
    "create_eip712_domain",
    "create_sweep_message",
    "build_sweep_typed_data",
    "hash_sweep_instruction",
    "AUTHORIZATION_NONCE",
    "hash_authorization",
    "create_signing_hash_list",
    "expected_signature_count",
    # Signatures
    "normalize_y_parity",
    "to_flat_signature",
    "to_compact_signature",
    "split_raw_signature",
    "attach_activation_signatures",
    "encode_signed_authorization",
    # Utils
    "USDC_BASE",
    "OTIM_DOMAIN_SALT",
    "parse_uint",
]
