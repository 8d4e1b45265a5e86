"""C++ type descriptors produced by classification."""

from dataclasses import dataclass, replace
from enum import Flag, StrEnum, auto


class CppTypeKind(StrEnum):
    """How a managed type is represented on the C++ side."""

    PRIMITIVE = auto()
    ENUM = auto()
    CLASS_WRAPPER = auto()
    BLITTABLE_STRUCT = auto()
    NON_BLITTABLE_STRUCT_WRAPPER = auto()
    UNKNOWN = auto()


class CppTypeFlags(Flag):
    """Qualifiers applied to a C++ type."""

    NONE = 0
    POINTER = auto()
    REFERENCE = auto()
    CONST = auto()


class NamespaceKind(StrEnum):
    NONE = auto()
    STANDARD = auto()
    NAMED = auto()


@dataclass(frozen=True)
class CppNamespace:
    """A C++ namespace path, outermost segment first.

    The standard namespace is identified by its kind, so a user namespace
    spelled ``std`` is still NAMED.
    """

    kind: NamespaceKind
    segments: tuple[str, ...] = ()

    @classmethod
    def named(cls, segments: "list[str] | tuple[str, ...]") -> "CppNamespace":
        if not segments:
            return NO_NAMESPACE
        return cls(NamespaceKind.NAMED, tuple(segments))

    @property
    def is_standard(self) -> bool:
        return self.kind == NamespaceKind.STANDARD


NO_NAMESPACE = CppNamespace(NamespaceKind.NONE)
STANDARD_NAMESPACE = CppNamespace(NamespaceKind.STANDARD, ("std",))

INCLUDE_CSTDINT = "<cstdint>"
INCLUDE_CSTDDEF = "<cstddef>"


@dataclass(frozen=True)
class CppType:
    """Describes a C++ type.

    Instances are immutable: every qualifier transform returns a new
    descriptor. Two classifications of the same managed type compare equal
    but are distinct objects.
    """

    kind: CppTypeKind
    namespace: CppNamespace
    name: str
    generic_arguments: "tuple[CppType, ...] | None" = None
    flags: CppTypeFlags = CppTypeFlags.NONE
    header_override: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("C++ type name must not be empty")
        if self.generic_arguments is not None:
            object.__setattr__(self, "generic_arguments", tuple(self.generic_arguments))
        header = self.header_override
        # Bare header names are quoted includes
        if header is not None and not header.startswith(("<", '"')):
            object.__setattr__(self, "header_override", f'"{header}"')

    @property
    def can_be_forward_declared(self) -> bool:
        # TODO: types with a custom header may still be forward declarable
        # once the override can name the declaring header separately.
        return self.header_override is None

    @property
    def is_pointer(self) -> bool:
        return CppTypeFlags.POINTER in self.flags

    @property
    def is_reference(self) -> bool:
        return CppTypeFlags.REFERENCE in self.flags

    @property
    def is_const(self) -> bool:
        return CppTypeFlags.CONST in self.flags

    def fully_qualified_namespace(self, start_with_global: bool = True) -> str:
        ns = "::".join(self.namespace.segments)
        if not start_with_global or not ns:
            return ns
        return f"::{ns}"

    def fully_qualified_name(self, start_with_global: bool = True) -> str:
        modifier = "const " if self.is_const else ""
        if self.is_pointer:
            suffix = "*"
        elif self.is_reference:
            suffix = "&"
        else:
            suffix = ""
        ns = self.fully_qualified_namespace(start_with_global)
        if ns:
            return f"{modifier}{ns}::{self.name}{suffix}"
        return f"{modifier}{self.name}{suffix}"

    def unqualified(self) -> "CppType":
        """Return this type without pointer, reference or const qualifiers."""
        return replace(self, flags=CppTypeFlags.NONE)

    def as_pointer(self) -> "CppType":
        return replace(self, flags=self.flags | CppTypeFlags.POINTER)

    def as_const_reference(self) -> "CppType":
        flags = (self.flags | CppTypeFlags.CONST | CppTypeFlags.REFERENCE) & ~CppTypeFlags.POINTER
        return replace(self, flags=flags)

    def as_return_type(self) -> "CppType":
        """Get the form used as the return value of a wrapped method.

        All types are returned by value, so this is the type unmodified.
        """
        return self

    def as_parameter_type(self) -> "CppType":
        """Get the form used as a wrapped method parameter.

        Classes and structs are passed by const reference; primitives and
        enums by value.
        """
        if self.kind in (
            CppTypeKind.CLASS_WRAPPER,
            CppTypeKind.BLITTABLE_STRUCT,
            CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER,
        ):
            return self.as_const_reference()
        return self

    def as_interop_type(self) -> "CppType":
        """Get the form passed through a function pointer into managed code."""
        if self.kind in (CppTypeKind.PRIMITIVE, CppTypeKind.BLITTABLE_STRUCT):
            return self
        if self.kind == CppTypeKind.ENUM:
            return UINT32
        return VOID_POINTER

    def __str__(self) -> str:
        return self.fully_qualified_name()


def _primitive(
    namespace: CppNamespace,
    name: str,
    flags: CppTypeFlags = CppTypeFlags.NONE,
    header_override: str | None = None,
) -> CppType:
    return CppType(CppTypeKind.PRIMITIVE, namespace, name, None, flags, header_override)


INT8 = _primitive(STANDARD_NAMESPACE, "int8_t", header_override=INCLUDE_CSTDINT)
INT16 = _primitive(STANDARD_NAMESPACE, "int16_t", header_override=INCLUDE_CSTDINT)
INT32 = _primitive(STANDARD_NAMESPACE, "int32_t", header_override=INCLUDE_CSTDINT)
INT64 = _primitive(STANDARD_NAMESPACE, "int64_t", header_override=INCLUDE_CSTDINT)
UINT8 = _primitive(STANDARD_NAMESPACE, "uint8_t", header_override=INCLUDE_CSTDINT)
UINT16 = _primitive(STANDARD_NAMESPACE, "uint16_t", header_override=INCLUDE_CSTDINT)
UINT32 = _primitive(STANDARD_NAMESPACE, "uint32_t", header_override=INCLUDE_CSTDINT)
UINT64 = _primitive(STANDARD_NAMESPACE, "uint64_t", header_override=INCLUDE_CSTDINT)
BOOLEAN = _primitive(NO_NAMESPACE, "bool")
SINGLE = _primitive(NO_NAMESPACE, "float")
DOUBLE = _primitive(NO_NAMESPACE, "double")
VOID_POINTER = _primitive(NO_NAMESPACE, "void", CppTypeFlags.POINTER)
VOID = _primitive(NO_NAMESPACE, "void")
NULL_POINTER = _primitive(STANDARD_NAMESPACE, "nullptr_t", header_override=INCLUDE_CSTDDEF)
