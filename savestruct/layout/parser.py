"""Record layout parser using Lark."""

import os
from dataclasses import dataclass
from typing import Any, TypeVar

from lark import Lark
from lark.visitors import Transformer

from savestruct.structure.primitives import is_primitive, lookup_primitive
from savestruct.structure.types import ENCODINGS

from .types import LayoutKind, LayoutMember, LayoutRecord, LayoutType

_g_parser: Lark | None = None


class ValidationError(RuntimeError):
    """Raised when layout validation fails."""


@dataclass
class _Prefix:
    value: str


TFilter = TypeVar("TFilter", bound=object)


def _filter(args: list[Any], class_type: type[TFilter]) -> list[TFilter]:
    return [v for v in args if isinstance(v, class_type)]


def _find_one(args: list[Any], class_type: type[object]) -> Any:
    filtered = _filter(args, class_type)
    if len(filtered) == 0:
        return None
    if len(filtered) > 1:
        raise RuntimeError(f"Found more than one {class_type}")

    if hasattr(filtered[0], "value"):
        return filtered[0].value
    return filtered[0]


class TreeTransformer(Transformer):
    """Transform parse tree into layout types."""

    def start(self, args: list[Any]) -> list[LayoutRecord]:
        return _filter(args, LayoutRecord)

    def record(self, args: list[Any]) -> LayoutRecord:
        return LayoutRecord(name=str(args[0]), members=_filter(args, LayoutMember))

    def member(self, args: list[Any]) -> LayoutMember:
        return LayoutMember(name=str(args[0]), type=_find_one(args, LayoutType))

    def array(self, args: list[Any]) -> LayoutType:
        return LayoutType(
            kind=LayoutKind.ARRAY,
            element=_find_one(args, LayoutType),
            length_prefix=_find_one(args, _Prefix),
        )

    def string(self, args: list[Any]) -> LayoutType:
        return LayoutType(
            kind=LayoutKind.STRING,
            encoding=str(args[0]),
            length_prefix=_find_one(args, _Prefix),
        )

    def sequence(self, args: list[Any]) -> LayoutType:
        return LayoutType(kind=LayoutKind.SEQUENCE, items=_filter(args, LayoutType))

    def named(self, args: list[Any]) -> LayoutType:
        name = str(args[0])
        kind = LayoutKind.PRIMITIVE if is_primitive(name) else LayoutKind.RECORD
        return LayoutType(kind=kind, name=name)

    def prefix(self, args: list[Any]) -> _Prefix:
        return _Prefix(value=str(args[0]))


def _validate_type(record: str, t: LayoutType, record_map: dict[str, LayoutRecord]) -> None:
    if t.kind == LayoutKind.RECORD and t.name not in record_map:
        raise ValidationError(f"{record} uses unknown type {t.name}")

    if t.kind == LayoutKind.STRING and t.encoding not in ENCODINGS:
        raise ValidationError(f"{record} uses unknown string encoding {t.encoding}")

    if t.length_prefix is not None:
        primitive = lookup_primitive(t.length_prefix)
        if primitive is None or not primitive.integral:
            raise ValidationError(
                f"{record} uses {t.length_prefix} as a length prefix, expected an integer primitive"
            )

    if t.element is not None:
        _validate_type(record, t.element, record_map)
    for item in t.items:
        _validate_type(record, item, record_map)


def _check_recursion(record_map: dict[str, LayoutRecord]) -> None:
    done: set[str] = set()

    def visit(name: str, path: list[str]) -> None:
        if name in path:
            cycle = " -> ".join(path[path.index(name) :] + [name])
            raise ValidationError(f"Record {name} is recursive: {cycle}")
        if name in done:
            return
        for member in record_map[name].members:
            for ref in member.type.references():
                visit(ref, path + [name])
        done.add(name)

    for name in record_map:
        visit(name, [])


def validate(records: list[LayoutRecord]) -> None:
    """Validate parsed layout definitions."""
    record_map: dict[str, LayoutRecord] = {}

    for record in records:
        if record.name in record_map:
            raise ValidationError(f"Record {record.name} is declared more than once")
        if is_primitive(record.name):
            raise ValidationError(f"Record {record.name} shadows a primitive type")
        if not record.members:
            raise ValidationError(f"Record {record.name} has no members")
        record_map[record.name] = record

    for record in records:
        names: set[str] = set()
        for member in record.members:
            if member.name in names:
                raise ValidationError(f"{record.name}.{member.name} is declared more than once")
            names.add(member.name)
            _validate_type(record.name, member.type, record_map)

    _check_recursion(record_map)


def parse(text: str) -> list[LayoutRecord]:
    """Parse a layout definition file."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/layout.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar)

    tree = _g_parser.parse(text)
    records = TreeTransformer().transform(tree)

    validate(records)

    return records
