"""Exceptions raised while compiling and decoding structure descriptors."""


class StructureError(RuntimeError):
    """Base exception for structure descriptor failures."""


class ConfigurationError(StructureError):
    """Raised when a descriptor is malformed.

    Unknown primitive tags, composite length prefixes and similar defects in
    a descriptor are authoring mistakes, so they are never recovered from.
    """


class DecodeError(StructureError):
    """Raised when the buffer does not match the declared shape."""
