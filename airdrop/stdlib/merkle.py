# -*- coding: utf-8 -*-
"""
airdrop.stdlib.merkle
=====================

Leaf encoding and sorted-pair Merkle proof verification. Pure functions: no
storage, no events. Used by the distributor contract and by the off-chain
tree tool so both sides agree byte-for-byte.

Encoding
--------
    leaf = keccak256(domain=b"merkledrop/leaf", account || u256_be(amount))
    node = keccak256(domain=b"merkledrop/node", min(a, b) || max(a, b))

`account` is the raw fixed-width address; `amount` is 32 bytes big-endian.
Because pairs are sorted before hashing, a proof is just the list of sibling
hashes from the leaf upwards (no left/right flags).
"""

from __future__ import annotations

from typing import Final, Sequence

from dropvm.stdlib import hash

from .math import is_u256

LEAF_DOMAIN: Final[bytes] = b"merkledrop/leaf"
NODE_DOMAIN: Final[bytes] = b"merkledrop/node"
HASH_LEN: Final[int] = 32
MAX_PROOF_DEPTH: Final[int] = 64
ZERO_ROOT: Final[bytes] = bytes(HASH_LEN)


def encode_leaf(account: bytes, amount: int) -> bytes:
    if not isinstance(account, (bytes, bytearray)) or len(account) == 0:
        raise ValueError("account must be non-empty bytes")
    if not is_u256(amount):
        raise ValueError("amount must be an int in [0, 2**256-1]")
    return bytes(account) + amount.to_bytes(32, "big")


def leaf_hash(account: bytes, amount: int) -> bytes:
    return hash.keccak256(encode_leaf(account, amount), domain=LEAF_DOMAIN)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Commutative node hash."""
    lo, hi = (a, b) if a <= b else (b, a)
    return hash.keccak256(lo + hi, domain=NODE_DOMAIN)


def is_hash(x: object) -> bool:
    return isinstance(x, bytes) and len(x) == HASH_LEN


def process_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Fold `proof` onto `leaf` and return the implied root.

    Raises ValueError for a malformed proof (non-32-byte element, too deep).
    """
    if not is_hash(leaf):
        raise ValueError("leaf must be 32 bytes")
    if not isinstance(proof, (list, tuple)):
        raise ValueError("proof must be a list of 32-byte hashes")
    if len(proof) > MAX_PROOF_DEPTH:
        raise ValueError("proof too deep")
    node = leaf
    for sibling in proof:
        if not is_hash(sibling):
            raise ValueError("proof element must be 32 bytes")
        node = hash_pair(node, sibling)
    return node


def verify_proof(proof: Sequence[bytes], root: bytes, leaf: bytes) -> bool:
    """True iff `proof` links `leaf` to a configured (non-zero) `root`."""
    if not is_hash(root) or root == ZERO_ROOT:
        return False
    try:
        return process_proof(leaf, proof) == root
    except ValueError:
        return False


__all__ = [
    "LEAF_DOMAIN",
    "NODE_DOMAIN",
    "HASH_LEN",
    "MAX_PROOF_DEPTH",
    "ZERO_ROOT",
    "encode_leaf",
    "leaf_hash",
    "hash_pair",
    "is_hash",
    "process_proof",
    "verify_proof",
]
