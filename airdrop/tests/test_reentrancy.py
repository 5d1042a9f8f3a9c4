"""
The fee recipient is the claimant itself, a contract whose receive() hook
re-enters claim() while the fee is being forwarded.
"""
from __future__ import annotations

import dataclasses

from airdrop.deploy import deploy_distributor
from airdrop.tests.conftest import SERVICE_FEE
from airdrop.tools.merkle_tree import MerkleTree

CLAIMER = "airdrop.tests.contracts.reentrant_claimer"


def test_reentrant_claim_sees_account_as_claimed(host, accounts, drop_config):
    attacker = host.deploy(CLAIMER, sender=accounts["outsider"])
    cfg = dataclasses.replace(drop_config, fee_recipient=attacker)
    t = MerkleTree([(attacker, 250), (accounts["alice"], 100)])
    token = deploy_distributor(host, cfg, admin=accounts["admin"])
    host.call(token, "set_merkle_root", t.root, sender=accounts["admin"])
    pool = host.view(token, "balance_of", token)

    funder = accounts["outsider"]
    host.credit(funder, SERVICE_FEE)
    ok = host.call(attacker, "attack", token, 250, list(t.claim(attacker).proof), sender=funder, value=SERVICE_FEE)

    assert ok is True
    assert host.view(attacker, "reentered") is True
    assert host.view(attacker, "last_error") == b"DROP:ALREADY_CLAIMED"
    # tokens moved exactly once
    assert host.view(token, "balance_of", attacker) == 250
    assert host.view(token, "balance_of", token) == pool - 250
    assert len(host.events(token, "Claim")) == 1
    # the fee went out and came back to the attacker as fee recipient
    assert host.balance(attacker) == SERVICE_FEE
    assert host.balance(token) == 0
