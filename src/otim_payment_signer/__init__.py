"""OTIM Payment Signer.

Builds OTIM payment requests, computes their EIP-7702 authorization and
EIP-712 instruction digests, signs them remotely with Turnkey, and submits
the signed request.
"""

from .config import Config
from .exceptions import (
    OtimSignerError,
    DecodeError,
    EncodingError,
    ExternalCallError,
    ConfigError,
)
from .clients import OtimApiClient, GasFees, TurnkeyApiClient
from .flow import PaymentFlow, PaymentFlowResult
from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    "Config",
    "OtimSignerError",
    "DecodeError",
    "EncodingError",
    "ExternalCallError",
    "ConfigError",
    "OtimApiClient",
    "GasFees",
    "TurnkeyApiClient",
    "PaymentFlow",
    "PaymentFlowResult",
    "setup_logging",
]
