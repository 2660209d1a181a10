"""Decode byte buffers using structure descriptors."""

from __future__ import annotations

import logging
from typing import Any

from .compiler import check_element_width, resolve_length_prefix, resolve_primitive
from .cursor import Cursor
from .errors import DecodeError
from .primitives import Primitive
from .sizes import min_size
from .types import (
    ENCODINGS,
    CompiledSpec,
    Descriptor,
    OrderedMap,
    PrimitiveRef,
    Sequence,
    String,
    VariableCount,
    as_descriptor,
)

log = logging.getLogger(__name__)


def _read_length(spec: Descriptor, cursor: Cursor) -> int:
    position = cursor.position
    length = resolve_length_prefix(spec).read(cursor)
    if length < 0:
        raise DecodeError(f"Negative length {length} at position {position}")
    return length


def decode_variable_count(spec: VariableCount, cursor: Cursor) -> list[Any]:
    """Read a count, then that many elements."""
    position = cursor.position
    count = _read_length(spec.length_prefix, cursor)

    check_element_width(spec.element)
    needed = count * min_size(spec.element)
    if needed > cursor.remaining:
        raise DecodeError(
            f"Count {count} at position {position} needs at least {needed} bytes, "
            f"only {cursor.remaining} remaining"
        )

    return [decode(spec.element, cursor) for _ in range(count)]


def decode_string(spec: String, cursor: Cursor) -> str:
    """Read a byte length, then that many bytes of encoded text."""
    codec = ENCODINGS.get(spec.encoding)
    if codec is None:
        raise DecodeError(f"Unknown string encoding: {spec.encoding}")

    position = cursor.position
    length = _read_length(spec.length_prefix, cursor)
    if length > cursor.remaining:
        raise DecodeError(
            f"String of {length} bytes at position {position}, only {cursor.remaining} remaining"
        )

    data = cursor.read_bytes(length)
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid {spec.encoding} string at position {position}: {e}") from e


def decode(spec: Any, cursor: Cursor) -> Any:
    """Decode one descriptor at the cursor's position.

    Primitives produce scalars, sequences and variable-count arrays produce
    lists, ordered maps produce dicts and strings produce str. The cursor is
    advanced past everything that was read.
    """
    if isinstance(spec, Primitive):
        return spec.read(cursor)

    if isinstance(spec, PrimitiveRef):
        return resolve_primitive(spec).read(cursor)

    if isinstance(spec, Sequence):
        return [decode(child, cursor) for child in spec.children]

    if isinstance(spec, OrderedMap):
        values = [decode(child, cursor) for child in spec.descriptors]
        return dict(zip(spec.names, values))

    if isinstance(spec, VariableCount):
        return decode_variable_count(spec, cursor)

    if isinstance(spec, String):
        return decode_string(spec, cursor)

    if isinstance(spec, CompiledSpec):
        return decode(spec.root, cursor)

    # Shorthand literals; anything else is rejected by as_descriptor
    return decode(as_descriptor(spec), cursor)


def read_structure(spec: Any, cursor: Cursor) -> Any:
    """Decode a record at the cursor's position.

    ``spec`` may be a compiled spec, an uncompiled descriptor or a shorthand
    literal. Records declared with ``ordered_map`` come back as a dict keyed
    by field name in declaration order, everything else as the positional
    value.

    Raises:
        ConfigurationError: If the descriptor is malformed.
        DecodeError: If the buffer does not hold the declared data.
    """
    start = cursor.position
    value = decode(spec, cursor)
    log.debug("Decoded %d bytes at position %d", cursor.position - start, start)
    return value
