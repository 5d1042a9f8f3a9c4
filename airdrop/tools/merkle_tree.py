# -*- coding: utf-8 -*-
"""
merkledrop-tree — build the eligibility tree, print proofs, verify claims.

Leaves and nodes are hashed exactly as the distributor contract hashes them
(:mod:`airdrop.stdlib.merkle`). Leaves are sorted by hash; an odd node at the
end of a level is promoted unchanged to the next level, so it contributes no
proof element.

Input (``build``):
  - CSV with a header ``account,amount`` (``address`` is accepted for account)
  - JSON: ``[{"account": "0x..", "amount": 100}, ...]`` or ``{"0x..": 100, ...}``

Artifact (``merkle.json``):
  {
    "merkle_root": "0x..",
    "token_total": "300",
    "claims": {"0x<account>": {"index": 0, "amount": "100", "proof": ["0x.."]}}
  }
Amounts are decimal strings so values above 2**53 survive JSON tooling.

Usage:
  merkledrop-tree build --input allocations.csv --out merkle.json
  merkledrop-tree proof --artifact merkle.json --account 0x..
  merkledrop-tree verify --artifact merkle.json --account 0x.. --amount 100
"""
from __future__ import annotations

import argparse
import csv
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from dropvm import logging as dlog
from dropvm.config import load_config

from ..stdlib import merkle
from . import atomic_write_text, canonical_json_str

log = dlog.get_logger("airdrop.tools.merkle_tree")

Row = Tuple[bytes, int]


class TreeError(ValueError):
    """Malformed allocation input or artifact."""


# ------------------------------ parsing --------------------------------------


def parse_account(value: Any, *, address_len: Optional[int] = None) -> bytes:
    alen = address_len if address_len is not None else load_config().address_len
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
    elif isinstance(value, str):
        h = value.strip()
        h = h[2:] if h.startswith(("0x", "0X")) else h
        try:
            b = bytes.fromhex(h)
        except ValueError as e:
            raise TreeError(f"invalid hex account: {value!r}") from e
    else:
        raise TreeError(f"account must be hex string, got {type(value).__name__}")
    if len(b) != alen:
        raise TreeError(f"account {value!r} must be {alen} bytes, got {len(b)}")
    return b


def parse_amount(value: Any) -> int:
    if isinstance(value, bool):
        raise TreeError("amount must be an integer")
    if isinstance(value, str):
        s = value.strip()
        if not (s.isascii() and s.isdigit()):
            raise TreeError(f"amount must be a non-negative integer, got {value!r}")
        value = int(s)
    if not isinstance(value, int) or not merkle.is_u256(value):
        raise TreeError(f"amount out of range: {value!r}")
    return value


def load_rows(path: Path, *, address_len: Optional[int] = None) -> List[Row]:
    """Read allocations from a .csv or .json file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TreeError(f"cannot read {path}: {e}") from e

    raw: List[Tuple[Any, Any]] = []
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TreeError(f"invalid JSON in {path}: {e}") from e
        if isinstance(data, dict):
            raw = list(data.items())
        elif isinstance(data, list):
            for item in data:
                if not isinstance(item, dict) or "account" not in item or "amount" not in item:
                    raise TreeError("JSON rows must be objects with 'account' and 'amount'")
                raw.append((item["account"], item["amount"]))
        else:
            raise TreeError("JSON input must be a list or an object")
    else:
        reader = csv.DictReader(text.splitlines())
        cols = set(reader.fieldnames or ())
        key = "account" if "account" in cols else "address" if "address" in cols else None
        if key is None or "amount" not in cols:
            raise TreeError("CSV needs a header: account,amount")
        for r in reader:
            a = (r.get(key) or "").strip()
            v = (r.get("amount") or "").strip()
            if a or v:
                raw.append((a, v))

    rows = [(parse_account(a, address_len=address_len), parse_amount(v)) for a, v in raw]
    if not rows:
        raise TreeError(f"no allocations in {path}")
    return rows


# ------------------------------ tree -----------------------------------------


@dataclass(frozen=True)
class Claim:
    index: int
    amount: int
    proof: Tuple[bytes, ...]


class MerkleTree:
    """Sorted-leaf tree over (account, amount) allocations."""

    def __init__(self, rows: Iterable[Row]) -> None:
        seen: Dict[bytes, int] = {}
        for account, amount in rows:
            if account in seen:
                raise TreeError(f"duplicate account 0x{account.hex()}")
            seen[account] = amount
        if not seen:
            raise TreeError("cannot build a tree with no leaves")

        try:
            hashed = sorted((merkle.leaf_hash(a, v), a) for a, v in seen.items())
        except ValueError as e:
            raise TreeError(str(e)) from e

        self._amounts = seen
        self._index = {a: i for i, (_, a) in enumerate(hashed)}
        self.levels: List[List[bytes]] = [[h for h, _ in hashed]]
        while len(self.levels[-1]) > 1:
            cur = self.levels[-1]
            nxt = [merkle.hash_pair(cur[i], cur[i + 1]) for i in range(0, len(cur) - 1, 2)]
            if len(cur) % 2:
                nxt.append(cur[-1])
            self.levels.append(nxt)

    @property
    def root(self) -> bytes:
        return self.levels[-1][0]

    @property
    def token_total(self) -> int:
        return sum(self._amounts.values())

    def __len__(self) -> int:
        return len(self._amounts)

    def __contains__(self, account: object) -> bool:
        return account in self._amounts

    def proof(self, account: bytes) -> List[bytes]:
        if account not in self._index:
            raise TreeError(f"account 0x{account.hex()} not in tree")
        pos = self._index[account]
        out: List[bytes] = []
        for level in self.levels[:-1]:
            sib = pos ^ 1
            if sib < len(level):
                out.append(level[sib])
            pos //= 2
        return out

    def claim(self, account: bytes) -> Claim:
        return Claim(index=self._index[account], amount=self._amounts[account], proof=tuple(self.proof(account)))

    def to_artifact(self) -> Dict[str, Any]:
        claims = {}
        for account in sorted(self._amounts, key=lambda a: self._index[a]):
            c = self.claim(account)
            claims["0x" + account.hex()] = {
                "index": c.index,
                "amount": str(c.amount),
                "proof": ["0x" + p.hex() for p in c.proof],
            }
        return {
            "merkle_root": "0x" + self.root.hex(),
            "token_total": str(self.token_total),
            "claims": claims,
        }


def build_tree(rows: Iterable[Row]) -> MerkleTree:
    return MerkleTree(rows)


def verify_claim(root: bytes, account: bytes, amount: int, proof: Sequence[bytes]) -> bool:
    """Offline check that mirrors the contract's proof verification."""
    if not merkle.is_u256(amount):
        return False
    return merkle.verify_proof(list(proof), root, merkle.leaf_hash(account, amount))


def _hex32(value: Any, what: str) -> bytes:
    if not isinstance(value, str):
        raise TreeError(f"{what} must be a hex string")
    h = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        b = bytes.fromhex(h)
    except ValueError as e:
        raise TreeError(f"{what} is not valid hex") from e
    if len(b) != merkle.HASH_LEN:
        raise TreeError(f"{what} must be {merkle.HASH_LEN} bytes")
    return b


def read_artifact(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TreeError(f"cannot read artifact {path}: {e}") from e
    if not isinstance(data, dict) or "merkle_root" not in data or not isinstance(data.get("claims"), dict):
        raise TreeError(f"{path} is not a merkle artifact")
    return data


def _artifact_claim(data: Dict[str, Any], account: bytes) -> Dict[str, Any]:
    c = data["claims"].get("0x" + account.hex())
    if c is None:
        raise TreeError(f"account 0x{account.hex()} not in artifact")
    return c


# ------------------------------ CLI ------------------------------------------


def _cmd_build(args: argparse.Namespace) -> int:
    rows = load_rows(args.input, address_len=args.address_len)
    tree = build_tree(rows)
    artifact = tree.to_artifact()
    atomic_write_text(args.out, canonical_json_str(artifact))
    log.info("merkle tree built", extra={"leaves": len(tree), "root": artifact["merkle_root"], "out": args.out})
    print(artifact["merkle_root"])
    return 0


def _cmd_proof(args: argparse.Namespace) -> int:
    data = read_artifact(args.artifact)
    account = parse_account(args.account, address_len=args.address_len)
    c = _artifact_claim(data, account)
    print(canonical_json_str({"account": "0x" + account.hex(), **c}), end="")
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    data = read_artifact(args.artifact)
    account = parse_account(args.account, address_len=args.address_len)
    amount = parse_amount(args.amount)
    root = _hex32(data["merkle_root"], "merkle_root")
    if args.proof is not None:
        raw_proof = json.loads(args.proof)
    else:
        raw_proof = _artifact_claim(data, account)["proof"]
    if not isinstance(raw_proof, list):
        raise TreeError("proof must be a JSON list of hex hashes")
    proof = [_hex32(p, "proof element") for p in raw_proof]
    ok = verify_claim(root, account, amount, proof)
    log.info("claim verified", extra={"account": account, "amount": amount, "valid": ok})
    print("valid" if ok else "invalid")
    return 0 if ok else 1


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="merkledrop-tree",
        description="Build and query the Merkle eligibility tree for a token distribution.",
    )
    p.add_argument("--address-len", type=int, default=None, help="Account width in bytes (default: DROPVM_ADDRESS_LEN).")
    p.add_argument("--log-level", default=None, help="Logging level (default: DROPVM_LOG_LEVEL or INFO).")
    sub = p.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("build", help="build merkle.json from a CSV/JSON allocation list")
    b.add_argument("--input", type=Path, required=True)
    b.add_argument("--out", type=Path, default=Path("merkle.json"))
    b.set_defaults(func=_cmd_build)

    pr = sub.add_parser("proof", help="print the claim (index, amount, proof) for an account")
    pr.add_argument("--artifact", type=Path, default=Path("merkle.json"))
    pr.add_argument("--account", required=True)
    pr.set_defaults(func=_cmd_proof)

    v = sub.add_parser("verify", help="verify a claim against the artifact's root")
    v.add_argument("--artifact", type=Path, default=Path("merkle.json"))
    v.add_argument("--account", required=True)
    v.add_argument("--amount", required=True)
    v.add_argument("--proof", default=None, help="JSON list of hex hashes (default: proof from artifact)")
    v.set_defaults(func=_cmd_verify)

    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    dlog.configure(level=args.log_level)
    with dlog.trace_scope():
        dlog.bind(component="merkledrop-tree")
        try:
            return args.func(args)
        except (TreeError, json.JSONDecodeError) as exc:
            log.error("command failed", extra={"error": str(exc)})
            print(f"[merkledrop-tree] {exc}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    raise SystemExit(main())
