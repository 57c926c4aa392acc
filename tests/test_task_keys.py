# tests/test_task_keys.py

from __future__ import annotations

import pytest

from todo_vault.tasks.task_keys import (
    KeyDecodeError,
    decode_key,
    encode_key,
    owner_prefix,
)


def test_encode_decode_inverse_for_awkward_owners() -> None:
    owners = ["alice", "", "a:b", "a#1", "12:ab#3", "ünïcødé", "a" * 300]
    for owner in owners:
        for task_id in (1, 7, 10**12):
            assert decode_key(encode_key(owner, task_id)) == (owner, task_id)


def test_encoding_is_injective_across_owner_prefix_collisions() -> None:
    # "a" + "#1" would collide with owner "a#1" under a naive "owner#id" scheme.
    keys = {
        encode_key("a", 1),
        encode_key("a#1", 1),
        encode_key("a", 11),
        encode_key("a#", 11),
        encode_key("a:", 1),
    }
    assert len(keys) == 5


def test_owner_prefix_does_not_match_other_owners() -> None:
    key_of_longer_owner = encode_key("alice2", 5)
    assert not key_of_longer_owner.startswith(owner_prefix("alice"))
    assert encode_key("alice", 5).startswith(owner_prefix("alice"))


@pytest.mark.parametrize(
    "bad",
    ["", "alice#1", "5:alice", "5:alice#", "5:alice#x", "9:alice#1", "5:alice#0", "5:alice#01", "x:alice#1"],
)
def test_decode_rejects_malformed_keys(bad: str) -> None:
    with pytest.raises(KeyDecodeError):
        decode_key(bad)
