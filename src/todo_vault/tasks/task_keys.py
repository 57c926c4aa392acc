# src/todo_vault/tasks/task_keys.py

"""
Lookup keys for task records.

A key is "<len(owner)>:<owner>#<id>". The length prefix makes the owner
segment self-delimiting, so owners may contain ':' or '#' and an owner that
is a prefix of another owner ("a" vs "a#1") can never produce or match the
other's keys.
"""

from __future__ import annotations

import re

_DIGITS = re.compile(r"(0|[1-9][0-9]*)")

_LEN_SEP = ":"
_ID_SEP = "#"


class KeyDecodeError(ValueError):
    """Raised when a stored key does not have the "<len>:<owner>#<id>" shape."""


def owner_prefix(owner: str) -> str:
    return f"{len(owner)}{_LEN_SEP}{owner}{_ID_SEP}"


def encode_key(owner: str, task_id: int) -> str:
    return f"{owner_prefix(owner)}{task_id}"


def decode_key(key: str) -> tuple[str, int]:
    if not isinstance(key, str):
        raise KeyDecodeError(f"key must be a string, got {type(key).__name__}")

    raw_len, sep, rest = key.partition(_LEN_SEP)
    if not sep or not _DIGITS.fullmatch(raw_len):
        raise KeyDecodeError(f"missing owner length in key {key!r}")

    n = int(raw_len)
    if len(rest) < n + 1 or rest[n] != _ID_SEP:
        raise KeyDecodeError(f"owner segment does not match its length in key {key!r}")

    owner = rest[:n]
    raw_id = rest[n + 1 :]
    if not _DIGITS.fullmatch(raw_id):
        raise KeyDecodeError(f"bad task id in key {key!r}")

    task_id = int(raw_id)
    if task_id < 1:
        raise KeyDecodeError(f"task id must be positive in key {key!r}")
    return owner, task_id

