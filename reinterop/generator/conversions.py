"""Expressions that convert values to and from their interop representation."""

from .context import GenerationContext
from .cpptype import CppType, CppTypeKind


def to_interop(t: CppType, variable: str, context: GenerationContext) -> str:
    """Get an expression converting `variable` to `t.as_interop_type()`."""
    match t.kind:
        case CppTypeKind.CLASS_WRAPPER:
            return f"{variable}.GetHandle().GetRaw()"
        case CppTypeKind.ENUM:
            return f"{t.as_interop_type().unqualified().fully_qualified_name()}({variable})"
        case _:
            return variable


def from_interop(t: CppType, variable: str, context: GenerationContext) -> str:
    """Get an expression converting `variable` from `t.as_interop_type()` back to `t`.

    For class wrappers and enums this is the inverse of `to_interop`: the
    result refers to the same object instance or enumerator.
    """
    match t.kind:
        case CppTypeKind.CLASS_WRAPPER:
            handle = context.object_handle_type().fully_qualified_name()
            return f"{t.unqualified().fully_qualified_name()}({handle}({variable}))"
        case CppTypeKind.ENUM:
            return f"{t.unqualified().fully_qualified_name()}({variable})"
        case _:
            return variable
