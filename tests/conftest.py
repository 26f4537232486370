"""Shared fixtures for the OTIM payment signer tests."""

import pytest
from eth_abi import encode
from eth_account import Account

from otim_payment_signer import Config
from otim_payment_signer.signing import USDC_BASE

# Test wallets (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_API_PRIVATE_KEY = "0x" + "cd" * 32
TEST_API_ACCOUNT = Account.from_key(TEST_API_PRIVATE_KEY)

DELEGATE_ADDRESS = "0x2222222222222222222222222222222222222222"
TARGET_ADDRESS = "0x1111111111111111111111111111111111111111"
ACTION_ADDRESS = "0x3333333333333333333333333333333333333333"

OTIM_API_URL = "https://otim.test"
TURNKEY_API_URL = "https://turnkey.test"


def encode_sweep_arguments(
    token=USDC_BASE,
    target=TARGET_ADDRESS,
    threshold=10**18,
    end_balance=0,
    fee_token=USDC_BASE,
    max_base_fee_per_gas=0,
    max_priority_fee_per_gas=0,
    execution_fee=0,
) -> str:
    """ABI-encode SweepERC20 arguments the way the payments API returns them."""
    encoded = encode(
        [
            "address",
            "address",
            "uint256",
            "uint256",
            "address",
            "uint256",
            "uint256",
            "uint256",
        ],
        [
            token,
            target,
            threshold,
            end_balance,
            fee_token,
            max_base_fee_per_gas,
            max_priority_fee_per_gas,
            execution_fee,
        ],
    )
    return "0x" + encoded.hex()


def make_instruction(chain_id=8453, salt=12345, **arguments) -> dict:
    return {
        "address": ACTION_ADDRESS,
        "chainId": chain_id,
        "salt": str(salt),
        "maxExecutions": "1",
        "action": ACTION_ADDRESS,
        "arguments": encode_sweep_arguments(**arguments),
    }


@pytest.fixture
def instruction() -> dict:
    return make_instruction()


@pytest.fixture
def build_response() -> dict:
    return {
        "requestId": "req-123",
        "subOrgId": "sub-org-456",
        "walletId": "wallet-789",
        "ephemeralWalletAddress": TEST_ACCOUNT.address.lower(),
        "completionInstructions": [make_instruction(salt=1)],
        "instructions": [],
    }


@pytest.fixture
def config() -> Config:
    return Config(
        otim_api_url=OTIM_API_URL,
        otim_api_key="test-api-key",
        target=TARGET_ADDRESS,
        threshold="1000000000000000000",
        chain_id=8453,
        turnkey_api_public_key="02" + "ef" * 32,
        turnkey_api_private_key=TEST_API_PRIVATE_KEY,
        turnkey_api_url=TURNKEY_API_URL,
    )
