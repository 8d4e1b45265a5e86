"""Type facts handed to the generator by the symbol-resolution front end."""

from dataclasses import dataclass, field
from enum import StrEnum, auto


class FactKind(StrEnum):
    """Shape of a type fact."""

    SPECIAL = auto()  # Built-in type with a well-known tag
    POINTER = auto()  # Unmanaged pointer to another type
    NAMED = auto()  # User-defined enum, class or struct
    REF = auto()  # Unresolved reference by name


class SpecialType(StrEnum):
    """Well-known managed types."""

    SBYTE = auto()
    BYTE = auto()
    INT16 = auto()
    UINT16 = auto()
    INT32 = auto()
    UINT32 = auto()
    INT64 = auto()
    UINT64 = auto()
    SINGLE = auto()
    DOUBLE = auto()
    BOOLEAN = auto()
    INTPTR = auto()
    UINTPTR = auto()
    VOID = auto()
    NULLPTR = auto()
    STRING = auto()
    OBJECT = auto()


SPECIAL_TYPE_NAMES: dict[SpecialType, str] = {
    SpecialType.SBYTE: "SByte",
    SpecialType.BYTE: "Byte",
    SpecialType.INT16: "Int16",
    SpecialType.UINT16: "UInt16",
    SpecialType.INT32: "Int32",
    SpecialType.UINT32: "UInt32",
    SpecialType.INT64: "Int64",
    SpecialType.UINT64: "UInt64",
    SpecialType.SINGLE: "Single",
    SpecialType.DOUBLE: "Double",
    SpecialType.BOOLEAN: "Boolean",
    SpecialType.INTPTR: "IntPtr",
    SpecialType.UINTPTR: "UIntPtr",
    SpecialType.VOID: "Void",
    SpecialType.NULLPTR: "NullPointer",
    SpecialType.STRING: "String",
    SpecialType.OBJECT: "Object",
}

REFERENCE_SPECIAL_TYPES = frozenset([SpecialType.STRING, SpecialType.OBJECT])


@dataclass(eq=False, repr=False)
class FieldFact:
    """A field declared by a type."""

    name: str
    type: "TypeFact"
    is_static: bool = False

    def __repr__(self) -> str:
        return f"FieldFact({self.name!r}, {self.type!r})"


@dataclass(eq=False, repr=False)
class TypeFact:
    """Read-only description of a managed type.

    Field graphs may be cyclic, so facts compare by identity and their repr
    does not recurse into fields.

    - namespaces: containing-namespace chain, outermost first
    - base_type: qualified name of the base type, if any
    - pointed_at: pointee for POINTER facts
    """

    kind: FactKind
    name: str
    special: SpecialType | None = None
    is_value_type: bool = False
    is_reference_type: bool = False
    base_type: str | None = None
    pointed_at: "TypeFact | None" = None
    namespaces: list[str] = field(default_factory=list)
    fields: list[FieldFact] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        if self.kind == FactKind.POINTER and self.pointed_at is not None:
            return f"{self.pointed_at.qualified_name}*"
        return ".".join([*self.namespaces, self.name])

    @property
    def instance_fields(self) -> list[FieldFact]:
        return [f for f in self.fields if not f.is_static]

    def __repr__(self) -> str:
        return f"TypeFact({self.kind.value}, {self.qualified_name!r})"


def special_fact(special: SpecialType) -> TypeFact:
    """Create a fact for a built-in type in the System namespace."""
    is_value_type = special not in REFERENCE_SPECIAL_TYPES
    return TypeFact(
        kind=FactKind.SPECIAL,
        name=SPECIAL_TYPE_NAMES[special],
        special=special,
        is_value_type=is_value_type,
        is_reference_type=not is_value_type,
        namespaces=["System"],
    )


def pointer_fact(pointed_at: TypeFact) -> TypeFact:
    """Create a fact for a pointer to another type."""
    return TypeFact(
        kind=FactKind.POINTER,
        name=pointed_at.name,
        is_value_type=True,
        pointed_at=pointed_at,
    )
