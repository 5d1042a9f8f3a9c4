# -*- coding: utf-8 -*-
"""
Off-chain tooling for airdrop operators:
- Canonical JSON encode for deterministic artifacts
- Atomic file writes
- Merkle tree builder / prover / verifier (see :mod:`.merkle_tree`)
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

__all__ = ["canonical_json_str", "atomic_write_text"]


def canonical_json_str(obj: Any) -> str:
    """Sorted keys, two-space indent, trailing newline: stable across runs."""
    return json.dumps(obj, sort_keys=True, indent=2, ensure_ascii=True) + "\n"


def atomic_write_text(path: Union[str, Path], text: str) -> Path:
    """Write `text` to `path` via a temp file in the same directory + rename."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{p.name}.", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, p)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
    return p
