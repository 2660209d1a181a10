"""Read cursor over an in-memory byte buffer."""

from __future__ import annotations

import mmap
import struct
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .errors import DecodeError


class Cursor:
    """Stateful read position over a byte buffer.

    The cursor does not own the buffer it is given: bytes, bytearray,
    memoryview or mmap objects are read in place and never closed. Every
    read advances the position, and reading past the end raises DecodeError
    without moving the cursor.
    """

    __slots__ = ("_data", "_position", "_size")

    def __init__(self, data: bytes | bytearray | memoryview | mmap.mmap, position: int = 0) -> None:
        self._data = data
        self._size = len(data)
        self._position = 0
        self.position = position

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Cursor:
        """Create a cursor at the start of the given bytes."""
        return cls(data)

    @classmethod
    def from_seq(cls, values: Iterable[int]) -> Cursor:
        """Create a cursor over a sequence of byte values.

        Values may be signed (-128..127) or unsigned (0..255), so data copied
        out of a hex dump or a signed byte array can be used directly.
        """
        return cls(seq_to_bytes(values))

    @classmethod
    @contextmanager
    def open(cls, path: str | Path) -> Iterator[Cursor]:
        """Memory-map a file read-only and yield a cursor over it.

        The mapping is closed when the block exits, so decoded values must
        not hold on to the cursor afterwards.
        """
        with open(path, "rb") as f:
            size = f.seek(0, 2)
            if size == 0:
                # mmap refuses empty files
                yield cls(b"")
                return
            with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
                yield cls(mapped)

    @property
    def position(self) -> int:
        """Current read position."""
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        if value < 0 or value > self._size:
            raise DecodeError(f"Position {value} out of range [0, {self._size}]")
        self._position = value

    @property
    def size(self) -> int:
        """Total size of the buffer."""
        return self._size

    @property
    def remaining(self) -> int:
        """Bytes remaining to read."""
        return self._size - self._position

    def _check(self, count: int) -> None:
        if count < 0:
            raise DecodeError(
                f"Cannot read a negative byte count ({count}) at position {self._position}"
            )
        if count > self.remaining:
            raise DecodeError(
                f"Cannot read {count} bytes at position {self._position}, "
                f"only {self.remaining} remaining"
            )

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        self._check(count)
        result = bytes(self._data[self._position : self._position + count])
        self._position += count
        return result

    def read_primitive(self, unpacker: struct.Struct) -> Any:
        """Read a single value with a precompiled struct format."""
        self._check(unpacker.size)
        value = unpacker.unpack_from(self._data, self._position)[0]
        self._position += unpacker.size
        return value

    def peek_bytes(self, count: int) -> bytes:
        """Peek at bytes without advancing position."""
        self._check(count)
        return bytes(self._data[self._position : self._position + count])

    def skip(self, count: int) -> None:
        """Skip bytes."""
        self._check(count)
        self._position += count

    def __repr__(self) -> str:
        return f"Cursor(position={self._position}, size={self._size})"


def seq_to_bytes(values: Iterable[int]) -> bytes:
    """Pack a sequence of signed or unsigned byte values into bytes."""
    result = bytearray()
    for value in values:
        if not -128 <= value <= 255:
            raise ValueError(f"{value} does not fit in a byte")
        result.append(value & 0xFF)
    return bytes(result)
