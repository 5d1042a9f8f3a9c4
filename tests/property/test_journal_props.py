# -*- coding: utf-8 -*-
"""
Property tests for dropvm.runtime.journal: commit/revert "laws".

The journal is driven by random sequences of writes and checkpoint operations
and compared with a naive model that keeps a full copy of the visible state
per checkpoint level.

- checkpoint → writes → revert  ⇒ state equals the state before the checkpoint
- checkpoint → writes → commit  ⇒ writes survive into the parent level
- the root level commits into / reverts to the last committed base
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from hypothesis import given
from hypothesis import strategies as st

from dropvm.runtime.journal import Journal

from . import U256_MAX

ADDR = b"\xaa" * 32
KEYS = st.sampled_from([b"a", b"b", b"c", b"d"])

OPS = st.lists(
    st.one_of(
        st.tuples(st.just("set"), KEYS, st.binary(max_size=4)),
        st.tuples(st.just("del"), KEYS),
        st.tuples(st.just("bal"), st.integers(min_value=0, max_value=U256_MAX)),
        st.tuples(st.just("emit"), st.integers(min_value=0, max_value=1_000)),
        st.tuples(st.just("begin")),
        st.tuples(st.just("commit")),
        st.tuples(st.just("revert")),
    ),
    max_size=60,
)

State = Tuple[Dict[bytes, bytes], int, List[int]]


def _copy(s: State) -> State:
    return dict(s[0]), s[1], list(s[2])


class _Model:
    def __init__(self) -> None:
        self.base: State = ({}, 0, [])
        self.stack: List[State] = [_copy(self.base)]

    @property
    def top(self) -> State:
        return self.stack[-1]

    def apply(self, op) -> None:
        kind = op[0]
        if kind == "set":
            _, k, v = op
            if v:
                self.top[0][k] = v
            else:
                self.top[0].pop(k, None)
        elif kind == "del":
            self.top[0].pop(op[1], None)
        elif kind == "bal":
            storage, _, events = self.top
            self.stack[-1] = (storage, op[1], events)
        elif kind == "emit":
            self.top[2].append(op[1])
        elif kind == "begin":
            self.stack.append(_copy(self.top))
        elif kind == "commit":
            if len(self.stack) > 1:
                t = self.stack.pop()
                self.stack[-1] = t
            else:
                self.base = _copy(self.stack[0])
        elif kind == "revert":
            if len(self.stack) > 1:
                self.stack.pop()
            else:
                self.stack[0] = _copy(self.base)


def _drive(j: Journal, op) -> None:
    kind = op[0]
    if kind == "set":
        j.storage_set(ADDR, op[1], op[2])
    elif kind == "del":
        j.storage_delete(ADDR, op[1])
    elif kind == "bal":
        j.set_balance(ADDR, op[1])
    elif kind == "emit":
        j.append_event(op[1])
    else:
        getattr(j, kind)()


@given(OPS)
def test_journal_matches_snapshot_model(ops) -> None:
    j, m = Journal(), _Model()
    for op in ops:
        _drive(j, op)
        m.apply(op)
        assert j.depth() == len(m.stack)
        storage, balance, events = m.top
        assert dict(j.storage_items(ADDR)) == storage
        assert j.get_balance(ADDR) == balance
        assert j.events() == events


WRITES = st.lists(
    st.one_of(
        st.tuples(st.just("set"), KEYS, st.binary(max_size=4)),
        st.tuples(st.just("del"), KEYS),
        st.tuples(st.just("bal"), st.integers(min_value=0, max_value=U256_MAX)),
        st.tuples(st.just("emit"), st.integers(min_value=0, max_value=1_000)),
        st.tuples(st.just("begin")),
    ),
    max_size=40,
)


@given(OPS, WRITES)
def test_revert_to_checkpoint_restores_state(prefix, body) -> None:
    j = Journal()
    for op in prefix:
        _drive(j, op)
    before = (dict(j.storage_items(ADDR)), j.get_balance(ADDR), j.events())

    marker = j.begin()
    for op in body:
        _drive(j, op)
    j.revert_to(marker - 1)

    assert (dict(j.storage_items(ADDR)), j.get_balance(ADDR), j.events()) == before
