# -*- coding: utf-8 -*-
"""
Tests for lbc_vm.runtime.journal (checkpointed accounts and storage).

Revert/commit laws (also as hypothesis properties):
- checkpoint -> writes -> revert  => state equals baseline
- checkpoint -> writes -> commit  => baseline updated with writes (last wins)
- nested checkpoints behave as a stack (inner revert keeps outer writes)
"""
from __future__ import annotations

from typing import Dict

import pytest
from hypothesis import given, settings, strategies as st

from lbc_vm.errors import AddressCollision
from lbc_vm.runtime.journal import Account, Journal, U256_MAX

A = b"\x01" * 20
B = b"\x02" * 20

HKEY = st.binary(min_size=1, max_size=32)
HVAL = st.binary(min_size=1, max_size=64)
MAP_SMALL = st.dictionaries(keys=HKEY, values=HVAL, min_size=0, max_size=16)


def _storage(j: Journal, addr: bytes) -> Dict[bytes, bytes]:
    return dict(j.storage_items(addr))


# ---------------------------- accounts ----------------------------


def test_account_bounds():
    with pytest.raises(ValueError):
        Account(balance=U256_MAX + 1)
    with pytest.raises(ValueError):
        Account(nonce=-1)
    acc = Account(nonce=2, balance=5, code="pkg.mod")
    assert acc.is_contract
    dup = acc.copy()
    dup.balance = 9
    assert acc.balance == 5


def test_account_writes_are_copy_on_write():
    j = Journal()
    j.ensure_account_for_write(A).balance = 10
    j.begin()
    j.ensure_account_for_write(A).balance = 3
    assert j.get_account(A).balance == 3
    j.revert()
    assert j.get_account(A).balance == 10


def test_create_account_rejects_existing_contract():
    j = Journal()
    j.begin()
    acc = j.create_account(A, code="pkg.mod")
    assert acc.nonce == 1 and acc.is_contract
    with pytest.raises(AddressCollision):
        j.create_account(A, code="pkg.other")
    j.commit()
    with pytest.raises(AddressCollision):
        j.create_account(A, code="pkg.other")


def test_create_account_over_prefunded_address():
    j = Journal()
    j.ensure_account_for_write(B).balance = 7
    acc = j.create_account(B, code="pkg.mod")
    assert acc.balance == 7 and acc.is_contract


def test_commit_and_revert_need_open_checkpoint():
    j = Journal()
    with pytest.raises(RuntimeError):
        j.commit()
    with pytest.raises(RuntimeError):
        j.revert()


# ---------------------------- storage ----------------------------


def test_storage_empty_value_deletes():
    j = Journal()
    j.storage_set(A, b"k", b"v")
    assert j.storage_get(A, b"k") == b"v"
    j.begin()
    j.storage_delete(A, b"k")
    assert j.storage_get(A, b"k") is None
    assert j.storage_get(A, b"k", b"dflt") == b"dflt"
    j.commit()
    assert _storage(j, A) == {}


def test_storage_is_scoped_per_address():
    j = Journal()
    j.storage_set(A, b"k", b"a")
    j.storage_set(B, b"k", b"b")
    assert j.storage_get(A, b"k") == b"a"
    assert j.storage_get(B, b"k") == b"b"


def test_storage_items_sorted_and_merged():
    j = Journal()
    j.storage_set(A, b"b", b"2")
    j.begin()
    j.storage_set(A, b"a", b"1")
    j.storage_set(A, b"b", b"")
    j.storage_set(A, b"c", b"3")
    assert list(j.storage_items(A)) == [(b"a", b"1"), (b"c", b"3")]


def test_storage_rejects_non_bytes():
    j = Journal()
    with pytest.raises(TypeError):
        j.storage_set(A, "k", b"v")  # type: ignore[arg-type]


def test_revert_to_marker():
    j = Journal()
    base = j.depth()
    j.begin()
    j.storage_set(A, b"k", b"1")
    j.begin()
    j.storage_set(A, b"k", b"2")
    j.begin()
    assert j.depth() == base + 3
    j.revert_to(base)
    assert j.depth() == base
    assert j.storage_get(A, b"k") is None
    with pytest.raises(ValueError):
        j.revert_to(-1)


# ---------------------------- laws ----------------------------


@settings(max_examples=60, deadline=None)
@given(base=MAP_SMALL, writes=MAP_SMALL)
def test_revert_restores_baseline(base, writes):
    j = Journal()
    for k, v in base.items():
        j.storage_set(A, k, v)
    j.begin()
    for k, v in writes.items():
        j.storage_set(A, k, v)
    j.revert()
    assert _storage(j, A) == base


@settings(max_examples=60, deadline=None)
@given(base=MAP_SMALL, writes=MAP_SMALL)
def test_commit_applies_writes_last_wins(base, writes):
    j = Journal()
    for k, v in base.items():
        j.storage_set(A, k, v)
    j.begin()
    for k, v in writes.items():
        j.storage_set(A, k, v)
    j.commit()
    expected = dict(base)
    expected.update(writes)
    assert _storage(j, A) == expected


@settings(max_examples=60, deadline=None)
@given(outer=MAP_SMALL, inner=MAP_SMALL)
def test_nested_inner_revert_keeps_outer(outer, inner):
    j = Journal()
    j.begin()
    for k, v in outer.items():
        j.storage_set(A, k, v)
    j.begin()
    for k, v in inner.items():
        j.storage_set(A, k, v)
    j.revert()
    j.commit()
    assert _storage(j, A) == outer
