"""Sequential binary writer and reader with length-prefixed blobs.

Values are packed little-endian with ``struct`` formats. Blobs and arrays are
prefixed by their byte length as an unsigned 64-bit integer.
"""
from __future__ import annotations

import os
import struct
from collections.abc import Iterable
from typing import Any

_LENGTH = struct.Struct("<Q")


class DeserializationError(Exception):
    """Raised when a read would go past the end of the data."""


def _format(fmt: str) -> str:
    return fmt if fmt[:1] in "@=<>!" else "<" + fmt


class ByteSerializer:
    """Appends packed values to an in-memory buffer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_bytes(self, data: bytes) -> None:
        """Write a length prefix followed by the raw bytes."""
        data = bytes(data)
        self._buffer += _LENGTH.pack(len(data))
        self._buffer += data

    def write_value(self, fmt: str, *args: Any) -> None:
        """Write values packed with a struct format (little-endian by default)."""
        self._buffer += struct.pack(_format(fmt), *args)

    def write_array(self, fmt: str, values: Iterable[Any]) -> None:
        """Write a length-prefixed run of items, each packed with fmt."""
        packer = struct.Struct(_format(fmt))
        packed = b"".join(
            packer.pack(*(v if isinstance(v, tuple) else (v,))) for v in values
        )
        self.write_bytes(packed)

    def output_to_file(self, path: str | os.PathLike) -> None:
        with open(path, "wb") as f:
            f.write(self._buffer)

    def data(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class ByteDeserializer:
    """Reads back what a ByteSerializer wrote, in the same order."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise DeserializationError(
                f"need {size} bytes at offset {self._pos}, only {self.remaining} left"
            )
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_value(self, fmt: str) -> Any:
        """Read values for a struct format; a single value is returned bare."""
        unpacker = struct.Struct(_format(fmt))
        values = unpacker.unpack(self._take(unpacker.size))
        return values[0] if len(values) == 1 else values

    def read_bytes(self) -> bytes:
        (size,) = _LENGTH.unpack(self._take(_LENGTH.size))
        return self._take(size)

    def read_array(self, fmt: str) -> list[Any]:
        unpacker = struct.Struct(_format(fmt))
        if unpacker.size == 0:
            raise ValueError(f"format {fmt!r} has zero size")
        chunk = self.read_bytes()
        if len(chunk) % unpacker.size:
            raise DeserializationError(
                f"array of {len(chunk)} bytes is not a multiple of item size {unpacker.size}"
            )
        return [
            item[0] if len(item) == 1 else item
            for item in unpacker.iter_unpack(chunk)
        ]