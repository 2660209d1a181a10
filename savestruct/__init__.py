"""savestruct - Declarative binary structure decoding for game save files."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("savestruct")
except PackageNotFoundError:
    __version__ = "(local)"
