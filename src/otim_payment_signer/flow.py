"""Payment request signing flow.

Runs the full sequence against the OTIM payments API and the Turnkey signer:

1. Fetch gas fees and build a payment request
2. Look up the delegate address and hash the EIP-7702 authorization
3. Hash every returned instruction (EIP-712), in order
4. Sign all hashes with the payment's ephemeral Turnkey wallet
5. Attach activation signatures and encode the signed authorization
6. Submit the signed payment request

Every step depends on the previous one; any failure aborts the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .clients import OtimApiClient, TurnkeyApiClient
from .config import Config
from .exceptions import ExternalCallError
from .signing import (
    attach_activation_signatures,
    encode_signed_authorization,
    to_flat_signature,
)

logger = logging.getLogger(__name__)


@dataclass
class PaymentFlowResult:
    """Outcome of one signing run."""

    request_id: Optional[str]
    delegate_address: str
    signing_hashes: List[str]
    signatures: List[str]
    """Flat r || s || v signatures, in signing order."""

    signed_authorization: str
    """RLP-encoded signed EIP-7702 authorization."""

    payment_request: Dict[str, Any]
    """Submission body, instructions carrying activationSignature."""

    submission: Any = field(default=None)
    """Payments API response to the submission (None on dry runs)."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requestId": self.request_id,
            "delegateAddress": self.delegate_address,
            "signingHashes": self.signing_hashes,
            "signatures": self.signatures,
            "signedAuthorization": self.signed_authorization,
            "paymentRequest": self.payment_request,
            "submission": self.submission,
        }


class PaymentFlow:
    """Builds, signs and submits one OTIM payment request."""

    def __init__(
        self,
        config: Config,
        otim_client: Optional[OtimApiClient] = None,
        turnkey_client: Optional[TurnkeyApiClient] = None,
    ):
        self._config = config
        self._otim = otim_client or OtimApiClient(config)
        self._turnkey = turnkey_client or TurnkeyApiClient(config)

    async def __aenter__(self) -> "PaymentFlow":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            await self._otim.close()
        finally:
            await self._turnkey.close()

    async def run(self, submit: bool = True, salt: Optional[int] = None) -> PaymentFlowResult:
        """Run the flow once.

        Args:
            submit: Submit the signed payment request (False stops after signing)
            salt: Completion instruction salt (random if not given)
        """
        logger.info("[1] Fetching optimal gas fees from OTIM API...")
        gas_fees = await self._otim.get_optimal_gas_fees()

        logger.info("[2] Building payment request...")
        payload = self._otim.build_sweep_payment_payload(gas_fees, salt=salt)
        response = await self._otim.build_payment_request(payload)

        sub_org_id = response.get("subOrgId")
        wallet_address = response.get("ephemeralWalletAddress")
        if not sub_org_id or not wallet_address:
            raise ExternalCallError(
                "Payment request build response is missing subOrgId or ephemeralWalletAddress",
                body=response,
            )

        logger.info("[3] Hashing authorization for EIP-7702...")
        delegate_address = await self._otim.get_delegate_address()
        auth_hash = self._otim.hash_authorization(delegate_address)

        logger.info("[4] Creating signing hash list...")
        signing_hashes = await self._otim.create_signing_hash_list(auth_hash, response)

        logger.info("[5] Signing %d payloads with Turnkey...", len(signing_hashes))
        raw_signatures = await self._turnkey.sign_raw_payloads(
            organization_id=sub_org_id,
            payloads=signing_hashes,
            sign_with=wallet_address,
        )
        signatures = [to_flat_signature(sig) for sig in raw_signatures]

        logger.info("[6] Attaching activation signatures...")
        auth_signature = attach_activation_signatures(response, raw_signatures)
        signed_authorization = encode_signed_authorization(
            delegate_address,
            auth_signature,
            chain_id=self._config.authorization_chain_id,
        )

        payment_request = {
            "requestId": response.get("requestId"),
            "signedAuthorization": signed_authorization,
            "completionInstructions": response.get("completionInstructions") or [],
            "instructions": response.get("instructions") or [],
            "metadata": payload.get("metadata", {}),
        }

        result = PaymentFlowResult(
            request_id=response.get("requestId"),
            delegate_address=delegate_address,
            signing_hashes=signing_hashes,
            signatures=signatures,
            signed_authorization=signed_authorization,
            payment_request=payment_request,
        )

        if submit:
            logger.info("[7] Submitting signed payment request...")
            result.submission = await self._otim.submit_payment_request(payment_request)
            logger.info("Payment request submitted: %s", result.request_id)
        else:
            logger.info("Dry run: signed payment request not submitted")

        return result
