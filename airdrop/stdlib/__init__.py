# -*- coding: utf-8 -*-
"""
airdrop.stdlib
==============

Reusable, deterministic building blocks for airdrop contracts. Everything here
runs inside a contract call and talks to the host only through
``dropvm.stdlib`` (storage, events, abi, hash).

Subpackages
-----------
- ``access``  ownable administrator capability
- ``math``    u256 domain checks and checked arithmetic
- ``token``   fungible ledger (balances, allowances, Transfer/Approval events)
- ``merkle``  leaf encoding and sorted-pair proof verification (pure)
- ``store``   typed storage slots (u256, flags, raw bytes)
"""
