"""
Fixtures for the distributor, the vesting lock and the Merkle tool.

Default drop (see `drop_config`):
    total 10_000 = airdrop 1_000 + dev 500 + liquidity 2_000 + treasury 6_500
    claims close 30 days after genesis, service fee 10 native units
    eligibility: alice 100, bob 200, carol 300
"""
from __future__ import annotations

from typing import Callable, Optional

import pytest

from airdrop.config import DropConfig
from airdrop.deploy import deploy_distributor, deploy_vesting_lock
from airdrop.tools.merkle_tree import MerkleTree
from dropvm import Host

GENESIS_TIMESTAMP = 1_700_000_000
CLAIM_WINDOW = 30 * 24 * 3600
SERVICE_FEE = 10
ALLOCATIONS = {"alice": 100, "bob": 200, "carol": 300}


@pytest.fixture
def drop_config(accounts) -> DropConfig:
    return DropConfig(
        name="Drop Token",
        symbol="DROP",
        total_supply=10_000,
        airdrop_pool=1_000,
        dev_pool=500,
        liquidity_pool=2_000,
        claim_period_ends=GENESIS_TIMESTAMP + CLAIM_WINDOW,
        service_fee=SERVICE_FEE,
        fee_recipient=accounts["fee_sink"],
        liquidity_recipient=accounts["liquidity"],
        dev_beneficiary=accounts["dev"],
        treasury_recipient=accounts["treasury"],
        decimals=18,
        vest_cliff_seconds=100,
        vest_duration_seconds=1_000,
    )


@pytest.fixture
def tree(accounts) -> MerkleTree:
    return MerkleTree([(accounts[who], amount) for who, amount in ALLOCATIONS.items()])


@pytest.fixture
def token(host: Host, accounts, drop_config) -> bytes:
    """Distributor deployed by `admin`, root not yet configured."""
    return deploy_distributor(host, drop_config, admin=accounts["admin"])


@pytest.fixture
def distributor(host: Host, accounts, token, tree) -> bytes:
    """Distributor with the eligibility root set and claimants funded for fees."""
    host.call(token, "set_merkle_root", tree.root, sender=accounts["admin"])
    for who in ALLOCATIONS:
        host.credit(accounts[who], 1_000)
    return token


@pytest.fixture
def lock(host: Host, accounts, token, drop_config) -> bytes:
    return deploy_vesting_lock(host, token, drop_config, sender=accounts["admin"])


@pytest.fixture
def claim(host: Host, tree) -> Callable[..., object]:
    """``claim(token, account, amount=None, proof=None, value=SERVICE_FEE)``"""

    def _claim(
        token: bytes,
        account: bytes,
        amount: Optional[int] = None,
        proof: Optional[list] = None,
        value: int = SERVICE_FEE,
    ):
        c = tree.claim(account) if account in tree else None
        if amount is None:
            amount = c.amount
        if proof is None:
            proof = list(c.proof) if c is not None else []
        return host.call(token, "claim", amount, proof, sender=account, value=value)

    return _claim
