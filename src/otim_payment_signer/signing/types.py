"""Types for OTIM instruction signing.

Records for the instructions returned by the payments API, their decoded
sweep arguments, and the signatures returned by the remote signer.
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Union

from eth_utils import is_address, to_checksum_address

from ..exceptions import EncodingError
from .utils import parse_hex_word, parse_recovery_id, parse_uint


@dataclass
class Instruction:
    """Instruction as returned by the payments API build call."""

    chain_id: int
    """Chain the instruction executes on."""

    salt: int
    """Per-instruction salt (uint256)."""

    max_executions: int
    """Maximum number of times the instruction may run (uint256)."""

    action: str
    """Checksummed address of the action contract."""

    arguments: str
    """ABI-encoded action arguments (hex string)."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Instruction":
        """Parse an instruction object from the payments API.

        Raises:
            EncodingError: If a field is missing or malformed
        """
        missing = [
            key
            for key in ("chainId", "salt", "maxExecutions", "action", "arguments")
            if data.get(key) is None
        ]
        if missing:
            raise EncodingError(
                f"Instruction is missing field(s): {', '.join(missing)}"
            )

        if not is_address(data["action"]):
            raise EncodingError(f"Invalid action address: {data['action']}")

        arguments = data["arguments"]
        if isinstance(arguments, (bytes, bytearray)):
            arguments = "0x" + bytes(arguments).hex()
        if not isinstance(arguments, str):
            raise EncodingError(f"Invalid arguments: {arguments!r}")

        try:
            return cls(
                chain_id=parse_uint(data["chainId"]),
                salt=parse_uint(data["salt"]),
                max_executions=parse_uint(data["maxExecutions"]),
                action=to_checksum_address(data["action"]),
                arguments=arguments,
            )
        except ValueError as e:
            raise EncodingError(f"Malformed instruction field: {e}") from e


@dataclass
class SweepArguments:
    """Decoded arguments of a SweepERC20 action."""

    token: str
    target: str
    threshold: int
    end_balance: int
    fee_token: str
    max_base_fee_per_gas: int
    max_priority_fee_per_gas: int
    execution_fee: int


@dataclass
class Fee:
    """Execution fee terms of an instruction."""

    token: str
    max_base_fee_per_gas: int
    max_priority_fee_per_gas: int
    execution_fee: int


@dataclass
class SweepERC20:
    """SweepERC20 action parameters."""

    token: str
    target: str
    threshold: int
    end_balance: int
    fee: Fee


@dataclass
class SweepERC20Message:
    """Typed EIP-712 message for a SweepERC20 instruction."""

    salt: int
    max_executions: int
    action: str
    sweep_erc20: SweepERC20

    def to_message(self) -> Dict[str, Any]:
        """Return the message dict keyed by the EIP-712 field names."""
        sweep = self.sweep_erc20
        return {
            "salt": self.salt,
            "maxExecutions": self.max_executions,
            "action": self.action,
            "sweepERC20": {
                "token": sweep.token,
                "target": sweep.target,
                "threshold": sweep.threshold,
                "endBalance": sweep.end_balance,
                "fee": {
                    "token": sweep.fee.token,
                    "maxBaseFeePerGas": sweep.fee.max_base_fee_per_gas,
                    "maxPriorityFeePerGas": sweep.fee.max_priority_fee_per_gas,
                    "executionFee": sweep.fee.execution_fee,
                },
            },
        }


@dataclass
class RawSignature:
    """Signature as returned by the remote signer."""

    r: str
    """32-byte hex string."""

    s: str
    """32-byte hex string."""

    v: Union[int, str]
    """Recovery id, as an int or a hex string (e.g. "00", "1b")."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawSignature":
        """Parse a signature object, keeping the signer's own rendering.

        Raises:
            KeyError: If r, s or v is missing
            ValueError: If r or s is not a 32-byte hex word, or v is not a
                recovery id
        """
        signature = cls(r=data["r"], s=data["s"], v=data["v"])
        parse_hex_word(signature.r)
        parse_hex_word(signature.s)
        parse_recovery_id(signature.v)
        return signature


@dataclass
class CompactSignature:
    """EIP-2098 compact signature."""

    y_parity: Literal[0, 1]
    r: str
    """0x-prefixed 32-byte hex string."""

    s: str
    """0x-prefixed 32-byte hex string."""

    def to_dict(self) -> Dict[str, Any]:
        """Return the activationSignature object expected by the payments API."""
        return {"r": self.r, "s": self.s, "yParity": self.y_parity}


# EIP-712 types for a SweepERC20 instruction
SWEEP_INSTRUCTION_TYPES = {
    "Instruction": [
        {"name": "salt", "type": "uint256"},
        {"name": "maxExecutions", "type": "uint256"},
        {"name": "action", "type": "address"},
        {"name": "sweepERC20", "type": "SweepERC20"},
    ],
    "SweepERC20": [
        {"name": "token", "type": "address"},
        {"name": "target", "type": "address"},
        {"name": "threshold", "type": "uint256"},
        {"name": "endBalance", "type": "uint256"},
        {"name": "fee", "type": "Fee"},
    ],
    "Fee": [
        {"name": "token", "type": "address"},
        {"name": "maxBaseFeePerGas", "type": "uint256"},
        {"name": "maxPriorityFeePerGas", "type": "uint256"},
        {"name": "executionFee", "type": "uint256"},
    ],
}

# EIP-712 domain type of the OtimDelegate contract
OTIM_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
    {"name": "salt", "type": "bytes32"},
]
