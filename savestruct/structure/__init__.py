"""Declarative binary structure descriptors and their decoder."""

from .compiler import compile_spec as compile_spec
from .cursor import Cursor as Cursor
from .decoder import decode as decode
from .decoder import read_structure as read_structure
from .errors import ConfigurationError as ConfigurationError
from .errors import DecodeError as DecodeError
from .errors import StructureError as StructureError
from .primitives import PRIMITIVES as PRIMITIVES
from .primitives import Primitive as Primitive
from .primitives import lookup_primitive as lookup_primitive
from .sizes import SizeInfo as SizeInfo
from .sizes import SizeKind as SizeKind
from .sizes import fixed_size as fixed_size
from .sizes import size_info as size_info
from .types import *
