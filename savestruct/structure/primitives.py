"""Primitive type table for structure descriptors."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .cursor import Cursor

# All multi-byte primitives are read big-endian
BYTE_ORDER = ">"

# Length prefix used by variable-count and string descriptors
DEFAULT_LENGTH_PREFIX = "int32"


@dataclass(frozen=True, slots=True)
class Primitive:
    """A fixed-size scalar decode unit.

    This is also the compiled form of a primitive reference: the compiler
    swaps every symbolic tag for its table entry, so decoding never has to
    look the tag up again.
    """

    tag: str
    size: int
    format: str
    integral: bool = True
    unpacker: struct.Struct = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        unpacker = struct.Struct(BYTE_ORDER + self.format)
        if unpacker.size != self.size:
            raise ValueError(f"{self.tag} declares {self.size} bytes but reads {unpacker.size}")
        object.__setattr__(self, "unpacker", unpacker)

    def read(self, cursor: Cursor) -> Any:
        """Read one value and advance the cursor by this primitive's size."""
        return cursor.read_primitive(self.unpacker)


# tag => primitive
PRIMITIVES: dict[str, Primitive] = {
    "byte": Primitive("byte", 1, "b"),
    "int16": Primitive("int16", 2, "h"),
    "int32": Primitive("int32", 4, "i"),
    "float": Primitive("float", 4, "f", integral=False),
    "double": Primitive("double", 8, "d", integral=False),
}

# Alternate spellings accepted in descriptors
ALIASES: dict[str, str] = {
    "int": "int32",
}


def primitive_tags() -> list[str]:
    """Return the canonical primitive tags."""
    return list(PRIMITIVES)


def lookup_primitive(tag: str) -> Primitive | None:
    """Return the primitive for a tag, or None if the tag is not a primitive."""
    if not isinstance(tag, str):
        return None
    return PRIMITIVES.get(ALIASES.get(tag, tag))


def is_primitive(tag: str) -> bool:
    """Check if a tag names a primitive."""
    return lookup_primitive(tag) is not None
