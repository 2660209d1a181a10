"""Shared layout fixtures."""

import struct

import pytest

CHARACTER_LAYOUT = """
# Inventory layout
record Item {
    id: int32
    count: int16
}

record Character {
    name: string(utf-8)
    level: byte
    position: [float, float]
    items: Item[prefix=int16]
}
"""


@pytest.fixture
def layout_text():
    return CHARACTER_LAYOUT


@pytest.fixture
def layout_file(tmp_path):
    path = tmp_path / "character.layout"
    path.write_text(CHARACTER_LAYOUT, encoding="utf-8")
    return path


@pytest.fixture
def character_bytes():
    return (
        struct.pack(">i", 3)
        + b"Ada"
        + struct.pack(">b", 7)
        + struct.pack(">ff", 1.5, -2.0)
        + struct.pack(">h", 2)
        + struct.pack(">ih", 1, 5)
        + struct.pack(">ih", 2, 10)
    )


@pytest.fixture
def character_value():
    return {
        "name": "Ada",
        "level": 7,
        "position": [1.5, -2.0],
        "items": [{"id": 1, "count": 5}, {"id": 2, "count": 10}],
    }
