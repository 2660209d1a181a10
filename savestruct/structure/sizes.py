"""Size calculation for structure descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from functools import lru_cache
from typing import Any

from .errors import ConfigurationError
from .primitives import Primitive, lookup_primitive
from .types import (
    CompiledSpec,
    Descriptor,
    OrderedMap,
    PrimitiveRef,
    Sequence,
    String,
    VariableCount,
    as_descriptor,
)


class SizeKind(StrEnum):
    """Classification of size characteristics."""

    FIXED = auto()  # Min == Max, no variable components
    VARIABLE = auto()  # Contains a variable-count or string somewhere


@dataclass(frozen=True)
class SizeInfo:
    """Size information for a descriptor."""

    min_size: int
    max_size: int | None  # None means unbounded
    kind: SizeKind

    @property
    def is_fixed(self) -> bool:
        return self.kind == SizeKind.FIXED


def _primitive_size(item: Any) -> int:
    if isinstance(item, Primitive):
        return item.size
    if isinstance(item, PrimitiveRef):
        item = item.tag
    primitive = lookup_primitive(item)
    return primitive.size if primitive else 0


def fixed_size(spec: Any) -> int:
    """Return the byte size of a flat record.

    Only primitives referenced directly by the record are counted. Anything
    that is not a primitive is skipped, which means field names in a raw
    token list like ``["x", "float", "y", "float"]`` are ignored, and so are
    nested sequences, maps, variable-count arrays and strings. Nested records
    are therefore undercounted; use ``size_info`` for those.
    """
    if isinstance(spec, CompiledSpec):
        spec = spec.root

    if isinstance(spec, (list, tuple)):
        return sum(_primitive_size(item) for item in spec)
    if isinstance(spec, Sequence):
        return sum(_primitive_size(item) for item in spec.children)
    if isinstance(spec, OrderedMap):
        return sum(_primitive_size(item) for item in spec.descriptors)
    return _primitive_size(spec)


def _sum(sizes: list[SizeInfo]) -> SizeInfo:
    total_min = 0
    total_max: int | None = 0
    kind = SizeKind.FIXED

    for size in sizes:
        total_min += size.min_size
        if total_max is not None and size.max_size is not None:
            total_max += size.max_size
        else:
            total_max = None
        if size.kind == SizeKind.VARIABLE:
            kind = SizeKind.VARIABLE

    return SizeInfo(total_min, total_max, kind)


def size_info(spec: Any) -> SizeInfo:
    """Calculate the minimum and maximum encoded size of any descriptor."""
    if isinstance(spec, CompiledSpec):
        spec = spec.root
    return _size_info(as_descriptor(spec))


@lru_cache(maxsize=1024)
def _size_info(spec: Descriptor) -> SizeInfo:
    if isinstance(spec, (Primitive, PrimitiveRef)):
        primitive = spec if isinstance(spec, Primitive) else lookup_primitive(spec.tag)
        if primitive is None:
            raise ConfigurationError(f"Unknown primitive type: {spec.tag}")
        return SizeInfo(primitive.size, primitive.size, SizeKind.FIXED)

    if isinstance(spec, Sequence):
        return _sum([_size_info(child) for child in spec.children])

    if isinstance(spec, OrderedMap):
        return _sum([_size_info(child) for child in spec.descriptors])

    if isinstance(spec, (VariableCount, String)):
        # Only the prefix is guaranteed, the payload may be any length
        prefix = _size_info(spec.length_prefix)
        return SizeInfo(prefix.min_size, None, SizeKind.VARIABLE)

    raise ConfigurationError(f"Cannot handle spec: {spec!r}")


def min_size(spec: Any) -> int:
    """Return the smallest number of bytes a descriptor can consume."""
    return size_info(spec).min_size
