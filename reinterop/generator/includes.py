"""Forward declarations and includes needed to use C++ types."""

from dataclasses import dataclass, field
from enum import StrEnum, auto

from .cpptype import INCLUDE_CSTDINT, CppType, CppTypeKind


class EmitContext(StrEnum):
    """Kind of file a type is used in."""

    HEADER = auto()
    SOURCE = auto()


def declaration_keyword(t: CppType) -> str:
    if t.kind in (CppTypeKind.BLITTABLE_STRUCT, CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER):
        return "struct"
    if t.kind == CppTypeKind.ENUM:
        return "enum class"
    return "class"


def forward_declaration(t: CppType) -> str | None:
    """Get the forward declaration of a type, or None if it cannot have one."""
    # Primitives do not need to be forward declared
    if t.kind == CppTypeKind.PRIMITIVE or not t.can_be_forward_declared:
        return None

    declaration = f"{declaration_keyword(t)} {t.name};"
    ns = t.fully_qualified_namespace(start_with_global=False)
    if not ns:
        return declaration
    return f"namespace {ns} {{ {declaration} }}"


def include_path(t: CppType) -> str:
    """Get the include that provides the full definition of a type."""
    if t.header_override is not None:
        return t.header_override

    path = "/".join(t.namespace.segments)
    if path:
        return f"<{path}/{t.name}.h>"
    return f"<{t.name}.h>"


def add_forward_declarations(t: CppType, forward_declarations: set[str]) -> None:
    declaration = forward_declaration(t)
    if declaration is not None:
        forward_declarations.add(declaration)


def add_header_includes(t: CppType, includes: set[str]) -> None:
    """Add the includes required to use a type in a generated header.

    Nothing is added if the type can be forward declared instead.
    """
    _add_includes(t, includes, for_header=True)


def add_source_includes(t: CppType, includes: set[str]) -> None:
    """Add the includes required to use a type in a generated source file."""
    _add_includes(t, includes, for_header=False)


def _add_includes(t: CppType, includes: set[str], for_header: bool) -> None:
    if t.header_override is not None:
        includes.add(t.header_override)
        return

    if t.kind == CppTypeKind.PRIMITIVE:
        if t.namespace.is_standard:
            includes.add(INCLUDE_CSTDINT)
        return

    if not for_header or not t.can_be_forward_declared:
        includes.add(include_path(t))


@dataclass
class IncludeSet:
    """Includes and forward declarations collected for one generated file."""

    context: EmitContext
    includes: set[str] = field(default_factory=set)
    forward_declarations: set[str] = field(default_factory=set)

    def add(self, t: CppType) -> None:
        if self.context == EmitContext.HEADER:
            add_header_includes(t, self.includes)
            add_forward_declarations(t, self.forward_declarations)
        else:
            add_source_includes(t, self.includes)

    def add_all(self, types: list[CppType]) -> None:
        for t in types:
            self.add(t)

    def sorted_includes(self) -> list[str]:
        return sorted(self.includes)

    def sorted_forward_declarations(self) -> list[str]:
        return sorted(self.forward_declarations)
