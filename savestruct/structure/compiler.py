"""Compile structure descriptors into their resolved form."""

from __future__ import annotations

import logging
from typing import Any

from .errors import ConfigurationError
from .primitives import Primitive, lookup_primitive
from .sizes import min_size
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

log = logging.getLogger(__name__)


def resolve_primitive(spec: Descriptor) -> Primitive:
    """Resolve a primitive reference to its table entry."""
    if isinstance(spec, Primitive):
        return spec
    if isinstance(spec, PrimitiveRef):
        primitive = lookup_primitive(spec.tag)
        if primitive is None:
            raise ConfigurationError(f"Unknown primitive type: {spec.tag}")
        return primitive
    raise ConfigurationError(f"Cannot handle spec: {spec!r}")


def resolve_length_prefix(spec: Descriptor) -> Primitive:
    """Resolve the primitive used to read a count or byte length."""
    if not isinstance(spec, (Primitive, PrimitiveRef)):
        raise ConfigurationError(f"Length prefix must be a primitive, got {spec!r}")
    primitive = resolve_primitive(spec)
    if not primitive.integral:
        raise ConfigurationError(f"Length prefix must be an integer primitive, got {primitive.tag}")
    return primitive


def check_element_width(element: Descriptor) -> None:
    """Reject repeated elements that consume no input."""
    if min_size(element) == 0:
        raise ConfigurationError(
            f"Variable-count element must consume at least one byte: {element!r}"
        )


def _compile(spec: Descriptor) -> Descriptor:
    if isinstance(spec, (Primitive, PrimitiveRef)):
        return resolve_primitive(spec)

    if isinstance(spec, String):
        return String(spec.encoding, resolve_length_prefix(spec.length_prefix))

    if isinstance(spec, Sequence):
        return Sequence(tuple(_compile(child) for child in spec.children))

    if isinstance(spec, OrderedMap):
        return OrderedMap(tuple((name, _compile(child)) for name, child in spec.fields))

    if isinstance(spec, VariableCount):
        element = _compile(spec.element)
        check_element_width(element)
        return VariableCount(element, resolve_length_prefix(spec.length_prefix))

    raise ConfigurationError(f"Cannot handle spec: {spec!r}")


def compile_spec(spec: Any) -> CompiledSpec:
    """Compile a descriptor, resolving every primitive reference.

    Compiling is a pure tree transform: the source descriptor is left as it
    is and a new tree is returned, wrapped in a CompiledSpec. Compiling an
    already compiled spec returns it unchanged.

    Raises:
        ConfigurationError: If the descriptor references an unknown primitive,
            uses a non-integer or composite length prefix, or repeats an
            element that has no width.
    """
    if isinstance(spec, CompiledSpec):
        return spec

    source = as_descriptor(spec)
    compiled = CompiledSpec(_compile(source), source)
    log.debug("Compiled %s descriptor", type(source).__name__)
    return compiled
