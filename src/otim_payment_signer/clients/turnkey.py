"""Turnkey API client for remote raw-payload signing."""

import base64
import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import add_0x_prefix, remove_0x_prefix, to_checksum_address

from ..config import Config
from ..exceptions import ExternalCallError
from ..signing import RawSignature

logger = logging.getLogger(__name__)

STAMP_SCHEME = "SIGNATURE_SCHEME_TK_API_SECP256K1_EIP191"
SIGN_RAW_PAYLOADS_ACTIVITY = "ACTIVITY_TYPE_SIGN_RAW_PAYLOADS"
PAYLOAD_ENCODING_HEXADECIMAL = "PAYLOAD_ENCODING_HEXADECIMAL"
HASH_FUNCTION_NO_OP = "HASH_FUNCTION_NO_OP"


def base64url_encode(data: bytes) -> str:
    """Unpadded base64url encoding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def create_stamp(payload: str, api_public_key: str, api_private_key: str) -> str:
    """Create an X-Stamp header value for a request body.

    The body is signed with EIP-191 (personal_sign) using the API key, and the
    (r, s) pair is DER-encoded as Turnkey expects.

    Args:
        payload: Exact request body that will be sent
        api_public_key: Turnkey API public key (hex)
        api_private_key: Turnkey API private key (hex, with or without 0x)

    Returns:
        base64url-encoded JSON stamp
    """
    signed = Account.sign_message(
        encode_defunct(text=payload), private_key=add_0x_prefix(api_private_key)
    )
    der_signature = encode_dss_signature(signed.r, signed.s).hex()

    stamp = {
        "publicKey": remove_0x_prefix(api_public_key),
        "scheme": STAMP_SCHEME,
        "signature": der_signature,
    }
    return base64url_encode(json.dumps(stamp, separators=(",", ":")).encode("utf-8"))


class TurnkeyApiClient:
    """Client for Turnkey's signing activities."""

    def __init__(
        self,
        config: Config,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the Turnkey API client.

        Args:
            config: Validated configuration
            http_client: Optional client to send requests with
        """
        self._base_url = config.turnkey_api_url
        self._api_public_key = config.turnkey_api_public_key
        self._api_private_key = config.turnkey_api_private_key
        self._http_client = http_client or httpx.AsyncClient()

    async def __aenter__(self) -> "TurnkeyApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http_client.aclose()

    async def sign_raw_payloads(
        self,
        organization_id: str,
        payloads: List[str],
        sign_with: str,
    ) -> List[RawSignature]:
        """Sign pre-hashed payloads with a Turnkey wallet account.

        Payloads are signed as-is (no hashing), and one signature is returned
        per payload, in the submitted order.

        Args:
            organization_id: Organization owning the signing wallet
            payloads: Hex payloads to sign
            sign_with: Address of the signing account

        Returns:
            RawSignature list matching payloads

        Raises:
            ExternalCallError: On transport errors, non-2xx responses, or a
                response without signatures
        """
        request_payload = {
            "type": SIGN_RAW_PAYLOADS_ACTIVITY,
            "timestampMs": str(int(time.time() * 1000)),
            "organizationId": organization_id,
            "parameters": {
                # Turnkey requires the EIP-55 checksummed address
                "signWith": to_checksum_address(sign_with),
                "payloads": payloads,
                "encoding": PAYLOAD_ENCODING_HEXADECIMAL,
                "hashFunction": HASH_FUNCTION_NO_OP,
            },
        }

        # The stamp covers the exact bytes sent
        body = json.dumps(request_payload, separators=(",", ":"))
        stamp = create_stamp(body, self._api_public_key, self._api_private_key)

        logger.info("Signing %d payloads with Turnkey...", len(payloads))
        try:
            response = await self._http_client.post(
                f"{self._base_url}/public/v1/submit/sign_raw_payloads",
                content=body.encode("utf-8"),
                headers={
                    "X-Stamp": stamp,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise ExternalCallError(f"Turnkey request failed: {e}") from e

        if not response.is_success:
            raise ExternalCallError(
                f"Turnkey request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data: Dict[str, Any] = response.json()
            signatures = data["activity"]["result"]["signRawPayloadsResult"]["signatures"]
            result = [RawSignature.from_dict(sig) for sig in signatures]
        except (ValueError, KeyError, TypeError) as e:
            raise ExternalCallError(
                "Invalid response structure from Turnkey sign_raw_payloads",
                status_code=response.status_code,
                body=response.text,
            ) from e

        for sig in result:
            logger.debug("Turnkey raw signature: %s", sig)

        if len(result) != len(payloads):
            raise ExternalCallError(
                f"Turnkey returned {len(result)} signatures for {len(payloads)} payloads"
            )
        return result
