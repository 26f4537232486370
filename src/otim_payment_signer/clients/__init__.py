"""HTTP clients for the OTIM payments API and the Turnkey signer."""

from .otim import OtimApiClient, GasFees
from .turnkey import TurnkeyApiClient, create_stamp

__all__ = [
    "OtimApiClient",
    "GasFees",
    "TurnkeyApiClient",
    "create_stamp",
]
