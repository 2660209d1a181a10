"""Tests for size calculation."""

import pytest

from savestruct.structure import (
    PRIMITIVES,
    ConfigurationError,
    SizeKind,
    compile_spec,
    fixed_size,
    ordered_map,
    size_info,
    string,
    variable_count,
)


def describe_fixed_size():
    def matches_table_for_every_primitive(expect):
        for tag, primitive in PRIMITIVES.items():
            expect(fixed_size([tag])) == primitive.size
            expect(fixed_size(tag)) == primitive.size

    def counts_double_as_eight_bytes(expect):
        expect(fixed_size(["double"])) == 8

    def skips_field_names_in_token_lists(expect):
        expect(fixed_size(["x", "float", "y", "int16", "flags", "byte"])) == 7

    def counts_field_names_that_match_primitive_tags(expect):
        expect(fixed_size(["byte", "int32"])) == 5
        expect(fixed_size(ordered_map("byte", "int32"))) == 4

    def sums_ordered_map_fields(expect):
        expect(fixed_size(ordered_map("a", "int32", "b", "double"))) == 12

    def accepts_compiled_specs(expect):
        expect(fixed_size(compile_spec(["int16", "int16"]))) == 4

    def does_not_recurse_into_nested_kinds(expect):
        spec = ordered_map(
            "a", "int32",
            "b", ["int32", "int32"],
            "c", variable_count("byte"),
            "d", string("utf-8"),
        )
        expect(fixed_size(spec)) == 4

    def ignores_unknown_tags(expect):
        expect(fixed_size(["int32", "quad"])) == 4


def describe_size_info():
    def calculates_fixed_records(expect):
        info = size_info(ordered_map("a", "int32", "b", ["float", "float"]))
        expect(info.min_size) == 12
        expect(info.max_size) == 12
        expect(info.kind) == SizeKind.FIXED
        expect(info.is_fixed) == True

    def treats_strings_as_unbounded(expect):
        info = size_info(ordered_map("id", "int16", "name", string("ascii", length_prefix="byte")))
        expect(info.min_size) == 3
        expect(info.max_size) == None
        expect(info.kind) == SizeKind.VARIABLE

    def treats_arrays_as_unbounded(expect):
        info = size_info(variable_count("double"))
        expect(info.min_size) == 4
        expect(info.max_size) == None

    def recurses_into_nested_records(expect):
        inner = ordered_map("x", "int16", "y", "int16")
        expect(size_info(ordered_map("a", inner, "b", inner)).min_size) == 8

    def rejects_unknown_tags(expect):
        with pytest.raises(ConfigurationError):
            size_info(["int32", "quad"])
