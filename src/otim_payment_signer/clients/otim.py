"""OTIM Payments API client.

Wraps the payments API endpoints the signing flow needs and exposes the
hashing steps that depend on the delegate contract address:

1. Fetch gas fee estimates and build a payment request
2. Look up the OtimDelegate address (once per client)
3. Hash the EIP-7702 authorization and every returned instruction
4. Submit the signed payment request
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from eth_utils import is_address, to_checksum_address

from ..config import Config
from ..exceptions import ExternalCallError
from ..signing import create_signing_hash_list, hash_authorization

logger = logging.getLogger(__name__)

# JavaScript's Number.MAX_SAFE_INTEGER, the salt range the API accepts
MAX_SAFE_SALT = 2**53 - 1


@dataclass
class GasFees:
    """Fee caps for instruction execution, as hex strings."""

    max_base_fee_per_gas: str
    max_priority_fee_per_gas: str


class OtimApiClient:
    """Client for the OTIM payments API.

    Example:
        ```python
        async with OtimApiClient(config) as client:
            fees = await client.get_optimal_gas_fees()
            response = await client.build_payment_request(
                client.build_sweep_payment_payload(fees)
            )
            delegate = await client.get_delegate_address()
            auth_hash = client.hash_authorization(delegate)
            hashes = await client.create_signing_hash_list(auth_hash, response)
        ```
    """

    def __init__(
        self,
        config: Config,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the OTIM API client.

        Args:
            config: Validated configuration
            http_client: Optional client to send requests with
        """
        self._config = config
        self._base_url = config.otim_api_url
        self._chain_id = config.chain_id
        self._http_client = http_client or httpx.AsyncClient()
        self._delegate_address: Optional[str] = None

    async def __aenter__(self) -> "OtimApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http_client.aclose()

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.otim_api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._http_client.request(
                method, url, headers=self._get_headers(), **kwargs
            )
        except httpx.HTTPError as e:
            raise ExternalCallError(f"OTIM API request failed: {method} {path}: {e}") from e

        if not response.is_success:
            logger.error(
                "OTIM API error: %s %s -> %s %s",
                method,
                path,
                response.status_code,
                response.text,
            )
            raise ExternalCallError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ExternalCallError(
                f"OTIM API returned invalid JSON for {method} {path}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def get_optimal_gas_fees(self) -> GasFees:
        """Fetch fee caps from OTIM's priority fee estimate.

        Uses the "normal" estimate, balanced between speed and cost. The base
        fee cap is left at zero.
        """
        estimates = await self._request(
            "GET", f"/instruction/estimate/max_priority_fee_per_gas/{self._chain_id}"
        )
        if not isinstance(estimates, dict) or estimates.get("normalMaxPriorityFeeEstimate") is None:
            raise ExternalCallError(
                "Invalid response structure from OTIM gas fee API", body=estimates
            )

        logger.info(
            "Available gas fee estimates: slow=%s normal=%s fast=%s",
            estimates.get("slowMaxPriorityFeeEstimate"),
            estimates.get("normalMaxPriorityFeeEstimate"),
            estimates.get("fastMaxPriorityFeeEstimate"),
        )

        try:
            normal = int(estimates["normalMaxPriorityFeeEstimate"])
        except (TypeError, ValueError) as e:
            raise ExternalCallError(
                "Invalid priority fee estimate from OTIM gas fee API", body=estimates
            ) from e

        return GasFees(max_base_fee_per_gas="0x0", max_priority_fee_per_gas=hex(normal))

    async def get_delegate_address(self) -> str:
        """Return the OtimDelegate address for the configured chain.

        The address is fetched once and reused, so every digest of a run is
        computed against the same verifying contract.
        """
        if self._delegate_address is not None:
            return self._delegate_address

        data = await self._request("GET", f"/config/delegate/address/{self._chain_id}")
        address = data.get("otimDelegateAddress") if isinstance(data, dict) else None
        if not address or not is_address(address):
            raise ExternalCallError(
                "Invalid response structure from delegate address API", body=data
            )

        self._delegate_address = to_checksum_address(address)
        logger.info("Delegate address: %s", self._delegate_address)
        return self._delegate_address

    def build_sweep_payment_payload(
        self,
        gas_fees: GasFees,
        salt: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Build a payment request with a single SweepERC20 completion instruction.

        Args:
            gas_fees: Fee caps for the instruction
            salt: Instruction salt (random if not given)
        """
        if salt is None:
            salt = random.randint(0, MAX_SAFE_SALT)

        token = self._config.sweep_token
        return {
            "completionInstructions": [
                {
                    "chainId": self._chain_id,
                    "salt": salt,
                    "maxExecutions": 1,
                    "actionArguments": {
                        "sweepERC20": {
                            "token": token,
                            "target": self._config.target,
                            "threshold": self._config.threshold,
                            "endBalance": "0x0",
                            "fee": {
                                "token": token,
                                "executionFee": 0,
                                "maxBaseFeePerGas": gas_fees.max_base_fee_per_gas,
                                "maxPriorityFeePerGas": gas_fees.max_priority_fee_per_gas,
                            },
                        }
                    },
                    "setEphemeralTarget": False,
                }
            ],
            "instructions": [],
            "metadata": {},
        }

    async def build_payment_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Build a payment request; returns instructions awaiting signatures."""
        logger.debug("Payment request build payload: %s", payload)
        response = await self._request("POST", "/payment/request/build", json=payload)
        if not isinstance(response, dict):
            raise ExternalCallError(
                "Invalid response structure from payment request build API",
                body=response,
            )
        logger.info("Payment request built: %s", response.get("requestId"))
        return response

    async def submit_payment_request(self, payload: Dict[str, Any]) -> Any:
        """Submit a payment request carrying the signed authorization and
        activation signatures."""
        logger.debug("Payment request submission: %s", payload)
        return await self._request("POST", "/payment/request/new", json=payload)

    def hash_authorization(self, delegate_address: str) -> str:
        """Hash the EIP-7702 authorization for the delegate (nonce 0)."""
        return hash_authorization(
            delegate_address, chain_id=self._config.authorization_chain_id
        )

    async def create_signing_hash_list(
        self, auth_hash: str, payment_response: Dict[str, Any]
    ) -> List[str]:
        """Build the ordered signing hash list for a build response."""
        delegate_address = await self.get_delegate_address()
        return create_signing_hash_list(auth_hash, payment_response, delegate_address)
