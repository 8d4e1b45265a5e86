"""Settings shared by every step of a generation run."""

import json
from dataclasses import dataclass
from pathlib import Path

from dataclasses_json import DataClassJsonMixin

from .cpptype import CppNamespace, CppType, CppTypeKind


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class GenerationContext(DataClassJsonMixin):
    """Configuration for mapping managed types to C++.

    - base_namespace: outermost C++ namespace of every generated type, a
      single identifier
    - enum_base_type: base type that marks a managed type as an enum
    - handle_namespace: dotted namespace of the object handle class, nested
      under base_namespace
    - handle_name: object handle class used to wrap raw handles of class
      instances
    """

    base_namespace: str = "DotNet"
    enum_base_type: str = "System.Enum"
    handle_namespace: str = "Reinterop"
    handle_name: str = "ObjectHandle"

    def __post_init__(self) -> None:
        if "." in self.base_namespace or ":" in self.base_namespace:
            raise ConfigError(
                f"Base namespace {self.base_namespace!r} must be a single namespace name"
            )

    @classmethod
    def load(cls, path: str | Path) -> "GenerationContext":
        """Load a context from a JSON file. Missing keys take their defaults."""
        with open(path, encoding="utf-8") as f:
            text = f.read()
        try:
            return cls.from_json(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

    def object_handle_type(self) -> CppType:
        """Get the C++ class that owns a raw managed object handle."""
        segments = [s for s in (self.base_namespace, *self.handle_namespace.split(".")) if s]
        return CppType(CppTypeKind.CLASS_WRAPPER, CppNamespace.named(segments), self.handle_name)
