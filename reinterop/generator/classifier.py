"""Classification of managed type facts into C++ type descriptors."""

import logging

from . import cpptype
from .context import GenerationContext
from .cpptype import CppNamespace, CppType, CppTypeKind
from .types import FactKind, SpecialType, TypeFact

logger = logging.getLogger(__name__)

SPECIAL_TYPE_MAP: dict[SpecialType, CppType] = {
    SpecialType.SBYTE: cpptype.INT8,
    SpecialType.INT16: cpptype.INT16,
    SpecialType.INT32: cpptype.INT32,
    SpecialType.INT64: cpptype.INT64,
    SpecialType.BYTE: cpptype.UINT8,
    SpecialType.UINT16: cpptype.UINT16,
    SpecialType.UINT32: cpptype.UINT32,
    SpecialType.UINT64: cpptype.UINT64,
    SpecialType.SINGLE: cpptype.SINGLE,
    SpecialType.DOUBLE: cpptype.DOUBLE,
    SpecialType.BOOLEAN: cpptype.BOOLEAN,
    SpecialType.INTPTR: cpptype.VOID_POINTER,
    SpecialType.UINTPTR: cpptype.VOID_POINTER,
    SpecialType.VOID: cpptype.VOID,
    SpecialType.NULLPTR: cpptype.NULL_POINTER,
}

# Each level costs two interpreter frames; stays well under the recursion limit
MAX_NESTING_DEPTH = 200

BLITTABLE_PRIMITIVES = frozenset(
    [
        SpecialType.BYTE,
        SpecialType.SBYTE,
        SpecialType.INT16,
        SpecialType.UINT16,
        SpecialType.INT32,
        SpecialType.UINT32,
        SpecialType.INT64,
        SpecialType.UINT64,
        SpecialType.INTPTR,
        SpecialType.UINTPTR,
        SpecialType.SINGLE,
        SpecialType.DOUBLE,
        SpecialType.BOOLEAN,
    ]
)


class CyclicTypeError(RuntimeError):
    """Raised when a value type contains itself through its fields."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Value type contains itself: {' -> '.join(cycle)}")


class TypeNestingError(RuntimeError):
    """Raised when value types nest too deeply to analyze."""

    def __init__(self, outermost: str, innermost: str):
        self.outermost = outermost
        self.innermost = innermost
        super().__init__(
            f"Value types nest more than {MAX_NESTING_DEPTH} levels deep: "
            f"{outermost} reaches {innermost}"
        )


def classify(fact: TypeFact, context: GenerationContext) -> CppType:
    """Map a managed type fact to a C++ type descriptor."""
    match fact.kind:
        case FactKind.SPECIAL if fact.special in SPECIAL_TYPE_MAP:
            return SPECIAL_TYPE_MAP[fact.special]
        case FactKind.POINTER if fact.pointed_at is not None:
            return classify(fact.pointed_at, context).as_pointer()
        case FactKind.SPECIAL | FactKind.POINTER | FactKind.NAMED | FactKind.REF:
            result = _classify_named(fact, context)
            logger.debug("Classified %s as %s (%s)", fact.qualified_name, result, result.kind)
            return result

    raise AssertionError(f"Unhandled fact kind {fact.kind}")


def namespace_path(fact: TypeFact, context: GenerationContext) -> list[str]:
    """Build the C++ namespace path of a named type, outermost first."""
    namespaces = [ns for ns in reversed(fact.namespaces) if ns]
    if context.base_namespace:
        namespaces.append(context.base_namespace)
    namespaces.reverse()

    # Avoid `DotNet::DotNet` when the managed namespace repeats the base
    if len(namespaces) >= 2 and namespaces[0] == namespaces[1]:
        del namespaces[0]

    return namespaces


def _classify_named(fact: TypeFact, context: GenerationContext) -> CppType:
    namespace = CppNamespace.named(namespace_path(fact, context))

    # TODO: generic arguments are stored on CppType but not yet derived here;
    # includes for them would also need to be planned.
    if _is_enum(fact, context):
        kind = CppTypeKind.ENUM
    elif fact.is_reference_type:
        kind = CppTypeKind.CLASS_WRAPPER
    elif is_blittable(fact, context):
        kind = CppTypeKind.BLITTABLE_STRUCT
    else:
        kind = CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER

    return CppType(kind, namespace, fact.name)


def _is_enum(fact: TypeFact, context: GenerationContext) -> bool:
    return fact.base_type is not None and fact.base_type == context.enum_base_type


def is_blittable(fact: TypeFact, context: GenerationContext) -> bool:
    """Determine if a type has the same binary layout in managed and C++ code.

    Each struct is checked once per call, however many fields reach it.

    Raises:
        CyclicTypeError: if a value type contains itself through its fields.
        TypeNestingError: if value types nest deeper than MAX_NESTING_DEPTH.
    """
    return _is_blittable(fact, context, [], {})


def _is_blittable(
    fact: TypeFact,
    context: GenerationContext,
    visiting: list[TypeFact],
    known: dict[TypeFact, bool],
) -> bool:
    if fact.kind == FactKind.SPECIAL and fact.special in BLITTABLE_PRIMITIVES:
        return True

    if fact.kind == FactKind.POINTER:
        return True

    if not fact.is_value_type:
        return False

    if _is_enum(fact, context):
        return True

    if fact in known:
        return known[fact]

    if any(v is fact for v in visiting):
        start = next(i for i, v in enumerate(visiting) if v is fact)
        cycle = [v.qualified_name for v in visiting[start:]] + [fact.qualified_name]
        raise CyclicTypeError(cycle)

    if len(visiting) >= MAX_NESTING_DEPTH:
        raise TypeNestingError(visiting[0].qualified_name, fact.qualified_name)

    visiting.append(fact)
    try:
        result = all(_is_blittable(f.type, context, visiting, known) for f in fact.instance_fields)
    finally:
        visiting.pop()

    known[fact] = result
    logger.debug("%s is %s", fact.qualified_name, "blittable" if result else "not blittable")
    return result
