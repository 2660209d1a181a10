"""Structure descriptor model.

A descriptor is plain data describing how to decode a region of a byte
buffer. The set of descriptor kinds is closed: the compiler, the decoder and
the size calculator each handle every kind listed in ``Descriptor`` and
reject anything else.

Descriptors are usually built with the constructors at the bottom of this
module, which also accept shorthand forms:

    ordered_map(
        "version", "int32",
        "name", string("utf-8"),
        "position", ["float", "float", "float"],
        "items", variable_count(ordered_map("id", "int32", "count", "int16")),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from .errors import ConfigurationError
from .primitives import DEFAULT_LENGTH_PREFIX, Primitive

__all__ = [
    "ENCODINGS",
    "CompiledSpec",
    "Descriptor",
    "OrderedMap",
    "PrimitiveRef",
    "Sequence",
    "String",
    "VariableCount",
    "as_descriptor",
    "ordered_map",
    "sequence",
    "string",
    "variable_count",
]
# Text encodings accepted by string descriptors, mapped to Python codec names
ENCODINGS: dict[str, str] = {
    "ascii": "ascii",
    "utf-8": "utf-8",
}


@dataclass(frozen=True, slots=True)
class PrimitiveRef:
    """Symbolic reference to an entry in the primitive type table."""

    tag: str


@dataclass(frozen=True, slots=True)
class Sequence:
    """Ordered children, decoded into a list."""

    children: tuple[Descriptor, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True, slots=True)
class OrderedMap:
    """Named children, decoded into a dict in declaration order."""

    fields: tuple[tuple[str, Descriptor], ...]

    def __post_init__(self) -> None:
        # descriptors are hashed by the size cache
        object.__setattr__(self, "fields", tuple(tuple(pair) for pair in self.fields))
        seen: set[str] = set()
        for name, _ in self.fields:
            if not isinstance(name, str):
                raise ConfigurationError(f"Field name must be a string, got {name!r}")
            if name in seen:
                raise ConfigurationError(f"Duplicate field name: {name}")
            seen.add(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    @property
    def descriptors(self) -> tuple[Descriptor, ...]:
        return tuple(descriptor for _, descriptor in self.fields)


@dataclass(frozen=True, slots=True)
class VariableCount:
    """An element repeated a number of times read from the buffer.

    The count is read with ``length_prefix`` immediately before the
    elements.
    """

    element: Descriptor
    length_prefix: Descriptor = PrimitiveRef(DEFAULT_LENGTH_PREFIX)


@dataclass(frozen=True, slots=True)
class String:
    """Length-prefixed encoded text."""

    encoding: str
    length_prefix: Descriptor = PrimitiveRef(DEFAULT_LENGTH_PREFIX)


Descriptor: TypeAlias = PrimitiveRef | Primitive | Sequence | OrderedMap | VariableCount | String

DESCRIPTOR_TYPES = (PrimitiveRef, Primitive, Sequence, OrderedMap, VariableCount, String)


@dataclass(frozen=True, slots=True)
class CompiledSpec:
    """A descriptor tree with every primitive reference resolved.

    Produced by ``compile_spec``; ``source`` is the tree it was compiled
    from.
    """

    root: Descriptor
    source: Descriptor


def as_descriptor(value: Any) -> Descriptor:
    """Convert shorthand forms into descriptors.

    Strings become primitive references and lists or tuples become
    sequences. Descriptors are returned unchanged.
    """
    if isinstance(value, DESCRIPTOR_TYPES):
        return value
    if isinstance(value, str):
        return PrimitiveRef(value)
    if isinstance(value, (list, tuple)):
        return Sequence(tuple(as_descriptor(item) for item in value))
    if isinstance(value, CompiledSpec):
        return value.root
    raise ConfigurationError(f"Cannot handle spec: {value!r}")


def sequence(*children: Any) -> Sequence:
    """Build a positional sequence from its children."""
    return Sequence(tuple(as_descriptor(child) for child in children))


def ordered_map(*pairs: Any) -> OrderedMap:
    """Build an ordered map from interleaved name and descriptor arguments.

    Example:
        ordered_map("x", "float", "y", "float")
    """
    if len(pairs) % 2:
        raise ConfigurationError(f"ordered_map needs name/descriptor pairs, got {len(pairs)} items")
    names = pairs[0::2]
    descriptors = pairs[1::2]
    return OrderedMap(tuple((name, as_descriptor(d)) for name, d in zip(names, descriptors)))


def variable_count(element: Any, length_prefix: Any = DEFAULT_LENGTH_PREFIX) -> VariableCount:
    """Repeat ``element`` a number of times given by a leading length prefix.

    Example:
        variable_count("int32", length_prefix="int16")

    reads an int16 count, then that many int32 values.
    """
    return VariableCount(as_descriptor(element), as_descriptor(length_prefix))


def string(encoding: str, length_prefix: Any = DEFAULT_LENGTH_PREFIX) -> String:
    """Read text of the given encoding, preceded by its byte length."""
    return String(encoding, as_descriptor(length_prefix))
