"""Reinterop C++ type mapping engine."""

from .classifier import CyclicTypeError as CyclicTypeError
from .classifier import TypeNestingError as TypeNestingError
from .classifier import classify as classify
from .classifier import is_blittable as is_blittable
from .context import ConfigError as ConfigError
from .context import GenerationContext as GenerationContext
from .conversions import from_interop as from_interop
from .conversions import to_interop as to_interop
from .cpptype import *
from .includes import EmitContext as EmitContext
from .includes import IncludeSet as IncludeSet
from .mapping import TypeMapping as TypeMapping
from .mapping import map_types as map_types
from .parser import ValidationError as ValidationError
from .parser import parse as parse
from .types import *
