"""Build structure descriptors from parsed record layouts."""

from pathlib import Path

from savestruct.structure.primitives import DEFAULT_LENGTH_PREFIX
from savestruct.structure.types import (
    Descriptor,
    OrderedMap,
    PrimitiveRef,
    Sequence,
    String,
    VariableCount,
)

from .parser import ValidationError, parse
from .types import LayoutKind, LayoutRecord, LayoutType


class DescriptorBuilder:
    """Convert layout records into ordered-map descriptors.

    Records referenced by other records are built once and shared, so every
    use of a record in the layout maps to the same descriptor.
    """

    def __init__(self, records: list[LayoutRecord]):
        self.records = {r.name: r for r in records}
        self._cache: dict[str, OrderedMap] = {}

    def build_type(self, t: LayoutType) -> Descriptor:
        """Build the descriptor for a member type."""
        if t.kind == LayoutKind.PRIMITIVE:
            return PrimitiveRef(t.name)

        if t.kind == LayoutKind.RECORD:
            return self.build_record(t.name)

        if t.kind == LayoutKind.STRING:
            return String(t.encoding, self._length_prefix(t))

        if t.kind == LayoutKind.ARRAY:
            return VariableCount(self.build_type(t.element), self._length_prefix(t))

        if t.kind == LayoutKind.SEQUENCE:
            return Sequence(tuple(self.build_type(item) for item in t.items))

        raise ValidationError(f"Unknown layout type: {t.kind}")

    def build_record(self, name: str) -> OrderedMap:
        """Build the descriptor for a record (with caching)."""
        if name in self._cache:
            return self._cache[name]

        if name not in self.records:
            raise ValidationError(f"Unknown record: {name}")

        record = self.records[name]
        descriptor = OrderedMap(tuple((m.name, self.build_type(m.type)) for m in record.members))
        self._cache[name] = descriptor
        return descriptor

    def build_all(self) -> dict[str, OrderedMap]:
        return {name: self.build_record(name) for name in self.records}

    @staticmethod
    def _length_prefix(t: LayoutType) -> PrimitiveRef:
        return PrimitiveRef(t.length_prefix or DEFAULT_LENGTH_PREFIX)


def build_descriptors(records: list[LayoutRecord]) -> dict[str, OrderedMap]:
    """Build a descriptor for every record, keyed by record name."""
    return DescriptorBuilder(records).build_all()


def load_layout(path: str | Path) -> dict[str, OrderedMap]:
    """Parse a layout file and build its record descriptors."""
    with open(path, encoding="utf-8") as f:
        text = f.read()
    return build_descriptors(parse(text))
