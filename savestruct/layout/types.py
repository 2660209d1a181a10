"""Type definitions for parsed record layouts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class LayoutKind(StrEnum):
    """The kind of a member type in a layout definition."""

    PRIMITIVE = auto()
    RECORD = auto()
    STRING = auto()
    ARRAY = auto()
    SEQUENCE = auto()


@dataclass
class LayoutType(DataClassJsonMixin):
    """Represents the type of a record member.

    - PRIMITIVE/RECORD: ``name`` is the primitive tag or record name
    - STRING: ``encoding`` and optional ``length_prefix``
    - ARRAY: ``element`` and optional ``length_prefix``
    - SEQUENCE: ``items``
    """

    kind: LayoutKind
    name: str | None = None
    encoding: str | None = None
    length_prefix: str | None = None
    element: LayoutType | None = None
    items: list[LayoutType] = field(default_factory=list)

    def references(self) -> list[str]:
        """Return the record names this type refers to."""
        if self.kind == LayoutKind.RECORD and self.name is not None:
            return [self.name]
        if self.kind == LayoutKind.ARRAY and self.element is not None:
            return self.element.references()
        if self.kind == LayoutKind.SEQUENCE:
            return [name for item in self.items for name in item.references()]
        return []


@dataclass
class LayoutMember(DataClassJsonMixin):
    """Represents a named member of a record."""

    name: str
    type: LayoutType


@dataclass
class LayoutRecord(DataClassJsonMixin):
    """Represents a record definition."""

    name: str
    members: list[LayoutMember]
