"""Identifiers and small container helpers."""
from __future__ import annotations

import secrets
import threading
from collections.abc import Container, MutableSequence
from typing import Any, Optional

INVALID_UUID = 0
_UUID_LIMIT = 1 << 64


def new_uuid() -> int:
    """A random, non-zero 64-bit identifier."""
    while True:
        value = secrets.randbits(64)
        if value != INVALID_UUID:
            return value


class UUID:
    """A 64-bit identifier; a random one is generated when no value is given."""

    __slots__ = ("_value",)

    INVALID = INVALID_UUID

    def __init__(self, value: Optional[int] = None) -> None:
        if value is None:
            value = new_uuid()
        if not 0 <= value < _UUID_LIMIT:
            raise ValueError(f"UUID out of 64-bit range: {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __call__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UUID):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"UUID({self._value})"


_type_ids: dict[type, int] = {}
_type_id_lock = threading.Lock()


def type_id(cls: type) -> int:
    """A small integer, stable for the life of the process, unique per class."""
    with _type_id_lock:
        return _type_ids.setdefault(cls, len(_type_ids))


def vector_contains(value: Any, container: Container) -> bool:
    return value in container


def push_back_multiple(container: MutableSequence, *args: Any) -> None:
    """Append every argument to the container, in order."""
    for item in args:
        container.append(item)