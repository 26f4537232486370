"""Configuration for the OTIM payment signer.

All settings are read from the environment (and a .env file, if present)
once at startup and validated together.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from eth_utils import is_address, to_checksum_address

from .exceptions import ConfigError
from .signing.utils import USDC_BASE

TURNKEY_API_URL = "https://api.turnkey.com"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

REQUIRED_VARIABLES = [
    "OTIM_API_URL",
    "OTIM_API_KEY",
    "OTIM_TARGET",
    "OTIM_THRESHOLD",
    "OTIM_CHAIN_ID",
    "OTIM_DEV_PUBLIC_KEY",
    "OTIM_DEV_PRIVATE_KEY",
]


@dataclass(frozen=True)
class Config:
    """Validated configuration for one run."""

    otim_api_url: str
    """Base URL of the OTIM payments API."""

    otim_api_key: str
    """Bearer token for the OTIM payments API."""

    target: str
    """Checksummed address swept funds are sent to."""

    threshold: str
    """Sweep threshold, as sent to the payments API."""

    chain_id: int
    """Chain the payment request is built for."""

    turnkey_api_public_key: str
    """Turnkey API public key (hex, compressed secp256k1)."""

    turnkey_api_private_key: str
    """Turnkey API private key used to stamp requests."""

    turnkey_api_url: str = TURNKEY_API_URL
    """Base URL of the Turnkey API."""

    authorization_chain_id: int = 0
    """Chain id the EIP-7702 authorization is signed for (0 = any chain)."""

    sweep_token: str = USDC_BASE
    """Token swept by the completion instruction, also used to pay fees."""

    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv: bool = True,
    ) -> "Config":
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            dotenv: Load a .env file into os.environ first

        Raises:
            ConfigError: Listing every missing or invalid variable
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        problems: List[str] = []
        missing = [var for var in REQUIRED_VARIABLES if not environ.get(var)]
        if missing:
            problems.append(
                f"missing required environment variables: {', '.join(missing)}"
            )

        def read_int(name: str, default: Optional[int] = None) -> Optional[int]:
            raw = environ.get(name)
            if not raw:
                return default
            try:
                return int(raw, 10)
            except ValueError:
                problems.append(f"{name} must be an integer, got {raw!r}")
                return default

        def read_address(name: str, default: Optional[str] = None) -> Optional[str]:
            raw = environ.get(name) or default
            if raw is None:
                return None
            if not is_address(raw):
                problems.append(f"{name} is not a valid address: {raw!r}")
                return None
            return to_checksum_address(raw)

        chain_id = read_int("OTIM_CHAIN_ID")
        authorization_chain_id = read_int("OTIM_AUTHORIZATION_CHAIN_ID", 0)
        target = read_address("OTIM_TARGET")
        sweep_token = read_address("OTIM_SWEEP_TOKEN", USDC_BASE)
        raw_level = environ.get("LOG_LEVEL") or "INFO"
        log_level = raw_level.upper()
        if log_level not in LOG_LEVELS:
            problems.append(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw_level!r}"
            )

        if problems:
            raise ConfigError(problems)

        return cls(
            otim_api_url=environ["OTIM_API_URL"].rstrip("/"),
            otim_api_key=environ["OTIM_API_KEY"],
            target=target,
            threshold=environ["OTIM_THRESHOLD"],
            chain_id=chain_id,
            turnkey_api_public_key=environ["OTIM_DEV_PUBLIC_KEY"],
            turnkey_api_private_key=environ["OTIM_DEV_PRIVATE_KEY"],
            turnkey_api_url=(environ.get("TURNKEY_API_URL") or TURNKEY_API_URL).rstrip("/"),
            authorization_chain_id=authorization_chain_id,
            sweep_token=sweep_token,
            log_level=log_level,
        )
