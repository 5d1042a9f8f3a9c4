# -*- coding: utf-8 -*-
"""
Exactly-once claims against a live distributor.

For a random allocation table and a random sequence of claim attempts
(repeats included), every account is paid its allocation once, repeats fail
with DROP:ALREADY_CLAIMED, and the pool shrinks by exactly what was paid.
"""
from __future__ import annotations

import hashlib

from hypothesis import given
from hypothesis import strategies as st

from airdrop.config import DropConfig
from airdrop.deploy import deploy_distributor
from airdrop.tools.merkle_tree import MerkleTree
from dropvm import Host, Revert

FEE = 7
POOL = 10_000


def _addr(tag: str) -> bytes:
    return hashlib.sha3_256(f"claim-props|{tag}".encode()).digest()


def _deploy(host: Host, tree: MerkleTree) -> bytes:
    cfg = DropConfig(
        name="Prop Drop",
        symbol="PROP",
        total_supply=POOL,
        airdrop_pool=POOL,
        dev_pool=0,
        liquidity_pool=0,
        claim_period_ends=host.block.timestamp + 3600,
        service_fee=FEE,
        fee_recipient=_addr("fee"),
        liquidity_recipient=_addr("liq"),
        dev_beneficiary=_addr("dev"),
        treasury_recipient=_addr("treasury"),
    )
    token = deploy_distributor(host, cfg, admin=_addr("admin"))
    host.call(token, "set_merkle_root", tree.root, sender=_addr("admin"))
    return token


@given(
    st.lists(st.integers(min_value=0, max_value=POOL // 8), min_size=1, max_size=6),
    st.data(),
)
def test_claims_pay_exactly_once(amounts, data) -> None:
    accounts = [_addr(f"acct{i}") for i in range(len(amounts))]
    tree = MerkleTree(zip(accounts, amounts))
    host = Host()
    token = _deploy(host, tree)

    attempts = data.draw(st.lists(st.integers(min_value=0, max_value=len(accounts) - 1), max_size=12))
    for a in accounts:
        host.credit(a, FEE * (attempts.count(accounts.index(a)) + 1))

    paid = {}
    for i in attempts:
        who, amount = accounts[i], amounts[i]
        proof = list(tree.proof(who))
        if who in paid:
            try:
                host.call(token, "claim", amount, proof, sender=who, value=FEE)
            except Revert as e:
                assert e.reason == b"DROP:ALREADY_CLAIMED"
            else:
                raise AssertionError("second claim succeeded")
        else:
            assert host.call(token, "claim", amount, proof, sender=who, value=FEE) is True
            paid[who] = amount

    for who in accounts:
        assert host.view(token, "has_claimed", who) is (who in paid)
        assert host.view(token, "balance_of", who) == paid.get(who, 0)
    assert host.view(token, "balance_of", token) == POOL - sum(paid.values())
    assert host.balance(_addr("fee")) == FEE * len(paid)
    assert len(host.events(token, "Claim")) == len(paid)
