"""Textual record layout definitions."""

from .builder import build_descriptors as build_descriptors
from .builder import load_layout as load_layout
from .parser import ValidationError as ValidationError
from .parser import parse as parse
from .types import LayoutKind as LayoutKind
from .types import LayoutMember as LayoutMember
from .types import LayoutRecord as LayoutRecord
from .types import LayoutType as LayoutType
