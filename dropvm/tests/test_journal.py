from __future__ import annotations

import pytest

from dropvm.errors import VmError
from dropvm.runtime.journal import Journal

A = b"\xaa" * 32
B = b"\xbb" * 32


def test_root_commit_applies_to_base():
    j = Journal()
    j.storage_set(A, b"k", b"v")
    j.set_balance(A, 7)
    j.append_event("e1")
    j.commit()
    assert j.depth() == 1
    assert j.storage_get(A, b"k") == b"v"
    assert j.get_balance(A) == 7
    assert j.events() == ["e1"]


def test_revert_discards_storage_balances_and_events():
    j = Journal()
    j.storage_set(A, b"k", b"base")
    j.set_balance(A, 10)
    j.append_event("kept")
    j.commit()

    j.begin()
    j.storage_set(A, b"k", b"changed")
    j.storage_set(A, b"new", b"x")
    j.set_balance(A, 3)
    j.set_balance(B, 7)
    j.append_event("dropped")
    j.revert()

    assert j.storage_get(A, b"k") == b"base"
    assert j.storage_get(A, b"new") == b""
    assert j.get_balance(A) == 10
    assert j.get_balance(B) == 0
    assert j.events() == ["kept"]


def test_nested_inner_revert_keeps_outer_writes():
    j = Journal()
    j.begin()
    j.storage_set(A, b"outer", b"1")
    j.begin()
    j.storage_set(A, b"inner", b"2")
    j.append_event("inner")
    j.revert()
    j.commit()
    j.commit()

    assert j.storage_get(A, b"outer") == b"1"
    assert j.storage_get(A, b"inner") == b""
    assert j.events() == []


def test_nested_commit_merges_into_parent_then_outer_revert_drops_all():
    j = Journal()
    j.begin()
    j.begin()
    j.storage_set(A, b"k", b"v")
    j.set_balance(B, 5)
    j.commit()
    assert j.storage_get(A, b"k") == b"v"
    j.revert()
    assert j.storage_get(A, b"k") == b""
    assert j.get_balance(B) == 0


def test_deletion_marker_shadows_base():
    j = Journal()
    j.storage_set(A, b"k", b"v")
    j.commit()

    j.begin()
    j.storage_delete(A, b"k")
    assert j.storage_get(A, b"k", default=b"?") == b"?"
    j.commit()
    j.commit()
    assert j.storage_get(A, b"k") == b""
    assert list(j.storage_items(A)) == []


def test_empty_value_is_deletion():
    j = Journal()
    j.storage_set(A, b"k", b"v")
    j.commit()
    j.storage_set(A, b"k", b"")
    j.commit()
    assert j.storage_get(A, b"k", default=b"gone") == b"gone"


def test_storage_items_sorted_with_overlay_precedence():
    j = Journal()
    j.storage_set(A, b"b", b"2")
    j.storage_set(A, b"a", b"1")
    j.commit()
    j.begin()
    j.storage_set(A, b"c", b"3")
    j.storage_set(A, b"a", b"one")
    assert list(j.storage_items(A)) == [(b"a", b"one"), (b"b", b"2"), (b"c", b"3")]


def test_revert_to_marker_unwinds_nested_checkpoints():
    j = Journal()
    m1 = j.begin()
    j.storage_set(A, b"x", b"1")
    j.begin()
    j.storage_set(A, b"y", b"2")
    j.commit()
    assert j.depth() == m1
    assert j.storage_get(A, b"y") == b"2"
    j.begin()
    j.storage_set(A, b"z", b"3")
    j.revert_to(1)
    assert j.depth() == 1
    assert j.storage_get(A, b"x") == b""
    assert j.storage_get(A, b"z") == b""


def test_marker_must_be_positive():
    j = Journal()
    with pytest.raises(ValueError):
        j.revert_to(0)


def test_rejects_negative_balance_and_non_bytes_keys():
    j = Journal()
    with pytest.raises(VmError):
        j.set_balance(A, -1)
    with pytest.raises(TypeError):
        j.storage_set(A, "k", b"v")  # type: ignore[arg-type]
