"""Tests for decoding structures."""

import struct

import pytest

from savestruct.structure import (
    ConfigurationError,
    Cursor,
    DecodeError,
    PrimitiveRef,
    Sequence,
    VariableCount,
    compile_spec,
    decode,
    ordered_map,
    read_structure,
    sequence,
    string,
    variable_count,
)


def pack(fmt, *values):
    return struct.pack(">" + fmt, *values)


def describe_read_structure():
    def decodes_positional_sequence(expect):
        cursor = Cursor(pack("if", 42, 3.5))
        expect(read_structure(compile_spec(["int32", "float"]), cursor)) == [42, 3.5]
        expect(cursor.remaining) == 0

    def decodes_ordered_map(expect):
        spec = compile_spec(ordered_map("a", "int32", "b", "int16", "c", "byte"))
        value = read_structure(spec, Cursor(pack("ihb", 1, 2, 3)))
        expect(value) == {"a": 1, "b": 2, "c": 3}
        expect(list(value)) == ["a", "b", "c"]

    def decodes_single_primitive(expect):
        expect(read_structure(compile_spec("int16"), Cursor(pack("h", -7)))) == -7

    def decodes_nested_records(expect):
        spec = ordered_map(
            "header", ordered_map("version", "int32"),
            "position", ["float", "float"],
        )
        value = read_structure(compile_spec(spec), Cursor(pack("iff", 3, 0.5, -1.0)))
        expect(value) == {"header": {"version": 3}, "position": [0.5, -1.0]}

    def decodes_uncompiled_descriptors(expect):
        names = variable_count(string("ascii"), length_prefix="byte")
        spec = ordered_map("a", "int32", "names", names)
        data = pack("ib", 9, 2) + pack("i", 2) + b"hi" + pack("i", 3) + b"you"

        expect(read_structure(spec, Cursor(data))) == {"a": 9, "names": ["hi", "you"]}
        expect(read_structure(compile_spec(spec), Cursor(data))) == {"a": 9, "names": ["hi", "you"]}

    def reuses_compiled_spec_across_cursors(expect):
        spec = compile_spec(["byte", "byte"])
        expect(read_structure(spec, Cursor(b"\x01\x02"))) == [1, 2]
        expect(read_structure(spec, Cursor(b"\x03\x04"))) == [3, 4]

    def threads_one_cursor_through_consecutive_reads(expect):
        spec = compile_spec(ordered_map("id", "int16"))
        cursor = Cursor(pack("hh", 5, 6))
        expect([read_structure(spec, cursor) for _ in range(2)]) == [{"id": 5}, {"id": 6}]

    def decodes_descriptors_built_with_lists(expect):
        spec = VariableCount(Sequence([PrimitiveRef("byte")]))
        cursor = Cursor.from_bytes(b"\0\0\0\1\1")
        expect(decode(spec, cursor)) == [[1]]
        expect(cursor.remaining) == 0

    def decodes_sequence_constructor(expect):
        spec = sequence("int16", variable_count("byte", length_prefix="byte"))
        expect(read_structure(spec, Cursor.from_bytes(pack("hbbb", 7, 2, 4, 5)))) == [7, [4, 5]]


def describe_variable_count():
    def decodes_counted_elements(expect):
        cursor = Cursor(pack("i", 3) + b"\x01\x02\x03")
        expect(decode(compile_spec(variable_count("byte")), cursor)) == [1, 2, 3]
        expect(cursor.remaining) == 0

    def decodes_zero_count_as_empty(expect):
        cursor = Cursor(pack("i", 0) + b"\x01")
        expect(decode(compile_spec(variable_count("byte")), cursor)) == []
        expect(cursor.position) == 4

    def uses_custom_length_prefix(expect):
        cursor = Cursor(pack("h", 2) + pack("ii", 10, 20))
        expect(decode(variable_count("int32", length_prefix="int16"), cursor)) == [10, 20]

    def decodes_record_elements(expect):
        spec = variable_count(ordered_map("id", "int32", "count", "int16"), length_prefix="byte")
        cursor = Cursor(pack("b", 2) + pack("ih", 1, 5) + pack("ih", 2, 10))
        expect(decode(spec, cursor)) == [{"id": 1, "count": 5}, {"id": 2, "count": 10}]

    def rejects_negative_count(expect):
        with pytest.raises(DecodeError) as exinfo:
            decode(variable_count("byte"), Cursor(pack("i", -1)))
        expect(str(exinfo.value)).includes("Negative length -1")

    def rejects_count_beyond_buffer_before_decoding(expect):
        cursor = Cursor(pack("i", 1_000_000) + pack("ii", 1, 2))
        with pytest.raises(DecodeError) as exinfo:
            decode(variable_count("int32"), cursor)
        expect(str(exinfo.value)).includes("needs at least 4000000 bytes")
        expect(cursor.position) == 4


def describe_string():
    def decodes_utf8(expect):
        cursor = Cursor(pack("i", 5) + "hello".encode("utf-8"))
        expect(decode(compile_spec(string("utf-8")), cursor)) == "hello"

    def decodes_multibyte_utf8(expect):
        data = "héllo".encode("utf-8")
        expect(decode(string("utf-8"), Cursor(pack("i", len(data)) + data))) == "héllo"

    def decodes_ascii_with_short_prefix(expect):
        cursor = Cursor(pack("b", 3) + b"abcX")
        expect(decode(string("ascii", length_prefix="byte"), cursor)) == "abc"
        expect(cursor.remaining) == 1

    def decodes_empty_string(expect):
        expect(decode(string("ascii"), Cursor(pack("i", 0)))) == ""

    def rejects_unknown_encoding(expect):
        with pytest.raises(DecodeError) as exinfo:
            decode(string("latin-9"), Cursor(pack("i", 1) + b"a"))
        expect(str(exinfo.value)).includes("Unknown string encoding: latin-9")

    def rejects_invalid_bytes(expect):
        with pytest.raises(DecodeError):
            decode(string("ascii"), Cursor(pack("i", 1) + b"\xe9"))

    def rejects_negative_length(expect):
        with pytest.raises(DecodeError):
            decode(string("utf-8"), Cursor(pack("i", -5)))

    def rejects_length_beyond_buffer(expect):
        with pytest.raises(DecodeError) as exinfo:
            decode(string("utf-8"), Cursor(pack("i", 10) + b"short"))
        expect(str(exinfo.value)).includes("only 5 remaining")


def describe_decode_errors():
    def rejects_unknown_primitive(expect):
        with pytest.raises(ConfigurationError) as exinfo:
            read_structure(["int32", "quad"], Cursor(b"\x00" * 16))
        expect(str(exinfo.value)).includes("quad")

    def rejects_exhausted_buffer(expect):
        with pytest.raises(DecodeError):
            read_structure(compile_spec(["int32", "int32"]), Cursor(pack("i", 1) + b"\x00"))

    def rejects_composite_length_prefix(expect):
        spec = variable_count("byte", length_prefix=["byte"])
        with pytest.raises(ConfigurationError):
            decode(spec, Cursor(b"\x01\x01"))

    def rejects_unsupported_values(expect):
        with pytest.raises(ConfigurationError):
            decode(3.5, Cursor(b""))
