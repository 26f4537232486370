"""OTIM + Turnkey Sweep Payment Example.

This example builds an OTIM payment request with a single SweepERC20
completion instruction, signs the EIP-7702 authorization and every instruction
with the payment's ephemeral Turnkey wallet, and prints the signed request.

Prerequisites:
1. pip install -e .
2. Set environment variables (OTIM_API_URL, OTIM_API_KEY, OTIM_TARGET,
   OTIM_THRESHOLD, OTIM_CHAIN_ID, OTIM_DEV_PUBLIC_KEY, OTIM_DEV_PRIVATE_KEY)

Usage:
    python turnkey_sweep.py
"""

import asyncio
import json

from otim_payment_signer import Config, ConfigError, PaymentFlow, setup_logging


async def main():
    try:
        config = Config.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return

    setup_logging(config.log_level)

    print("=" * 60)
    print("  OTIM SWEEP PAYMENT REQUEST WITH TURNKEY SIGNING")
    print("=" * 60)

    async with PaymentFlow(config) as flow:
        # Stop before submission so the signed request can be inspected
        result = await flow.run(submit=False)

    print(f"\nRequest ID:        {result.request_id}")
    print(f"Delegate address:  {result.delegate_address}")
    print(f"Hashes signed:     {len(result.signing_hashes)}")
    print(f"Authorization RLP: {result.signed_authorization}")
    print("\nSigned payment request:")
    print(json.dumps(result.payment_request, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
