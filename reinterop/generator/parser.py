"""Type fact description parser using Lark."""

import logging
import os
from dataclasses import dataclass
from typing import Any, TypeVar

from lark import Lark, Token
from lark.visitors import Transformer

from .context import GenerationContext
from .types import FactKind, FieldFact, SpecialType, TypeFact, pointer_fact, special_fact

logger = logging.getLogger(__name__)

_g_parser: Lark | None = None

BUILTIN_TYPES: dict[str, SpecialType] = {
    "sbyte": SpecialType.SBYTE,
    "int8": SpecialType.SBYTE,
    "byte": SpecialType.BYTE,
    "uint8": SpecialType.BYTE,
    "int16": SpecialType.INT16,
    "uint16": SpecialType.UINT16,
    "int32": SpecialType.INT32,
    "uint32": SpecialType.UINT32,
    "int64": SpecialType.INT64,
    "uint64": SpecialType.UINT64,
    "single": SpecialType.SINGLE,
    "float32": SpecialType.SINGLE,
    "double": SpecialType.DOUBLE,
    "float64": SpecialType.DOUBLE,
    "bool": SpecialType.BOOLEAN,
    "intptr": SpecialType.INTPTR,
    "uintptr": SpecialType.UINTPTR,
    "void": SpecialType.VOID,
    "nullptr": SpecialType.NULLPTR,
    "string": SpecialType.STRING,
    "object": SpecialType.OBJECT,
}


class ValidationError(RuntimeError):
    """Raised when a type universe is inconsistent."""


@dataclass
class _Path:
    segments: list[str]


@dataclass
class _TypeRef:
    path: list[str]
    pointer_depth: int


T = TypeVar("T")


def _find_many(args: list[Any], class_type: type[T]) -> list[T]:
    return [v for v in args if isinstance(v, class_type)]


def _flatten(args: list[Any]) -> list[TypeFact]:
    facts: list[TypeFact] = []
    for arg in args:
        if isinstance(arg, list):
            facts.extend(arg)
        elif isinstance(arg, TypeFact):
            facts.append(arg)
    return facts


class TreeTransformer(Transformer):
    """Transform parse tree into type facts with unresolved field types."""

    def __init__(self, context: GenerationContext):
        super().__init__()
        self.context = context

    def start(self, args: list[Any]) -> list[TypeFact]:
        return _flatten(args)

    def dotted_name(self, args: list[Any]) -> _Path:
        return _Path(segments=[str(arg) for arg in args])

    def type_ref(self, args: list[Any]) -> _TypeRef:
        path = _find_many(args, _Path)[0]
        depth = sum(1 for arg in args if isinstance(arg, Token) and arg.type == "POINTER")
        return _TypeRef(path=path.segments, pointer_depth=depth)

    def field(self, args: list[Any]) -> FieldFact:
        is_static = any(isinstance(arg, Token) and arg.type == "STATIC" for arg in args)
        name = next(arg for arg in args if isinstance(arg, Token) and arg.type == "NAME")
        ref = _find_many(args, _TypeRef)[0]

        fact = TypeFact(kind=FactKind.REF, name=ref.path[-1], namespaces=ref.path[:-1])
        for _ in range(ref.pointer_depth):
            fact = pointer_fact(fact)
        return FieldFact(name=str(name), type=fact, is_static=is_static)

    def namespace_block(self, args: list[Any]) -> list[TypeFact]:
        path = _find_many(args, _Path)[0]
        facts = _flatten(args)
        for fact in facts:
            fact.namespaces = path.segments + fact.namespaces
        return facts

    def struct_decl(self, args: list[Any]) -> TypeFact:
        return TypeFact(
            kind=FactKind.NAMED,
            name=str(args[0]),
            is_value_type=True,
            fields=_find_many(args, FieldFact),
        )

    def class_decl(self, args: list[Any]) -> TypeFact:
        return TypeFact(
            kind=FactKind.NAMED,
            name=str(args[0]),
            is_reference_type=True,
            fields=_find_many(args, FieldFact),
        )

    def enum_decl(self, args: list[Any]) -> TypeFact:
        return TypeFact(
            kind=FactKind.NAMED,
            name=str(args[0]),
            is_value_type=True,
            base_type=self.context.enum_base_type,
        )


def _lookup(
    ref: TypeFact, scope: list[str], declared: dict[str, TypeFact], owner: TypeFact
) -> TypeFact:
    if ref.kind == FactKind.POINTER and ref.pointed_at is not None:
        ref.pointed_at = _lookup(ref.pointed_at, scope, declared, owner)
        return ref

    if not ref.namespaces and ref.name in BUILTIN_TYPES:
        return special_fact(BUILTIN_TYPES[ref.name])

    # Innermost enclosing namespace first, then outward to the global namespace
    for depth in range(len(scope), -1, -1):
        candidate = ".".join([*scope[:depth], *ref.namespaces, ref.name])
        if candidate in declared:
            return declared[candidate]

    raise ValidationError(f"Unknown type {ref.qualified_name} used by {owner.qualified_name}")


def link(facts: list[TypeFact]) -> None:
    """Replace field type references with the declared facts they name."""
    declared: dict[str, TypeFact] = {}
    for fact in facts:
        if fact.qualified_name in declared:
            raise ValidationError(f"{fact.qualified_name} declared more than once")
        declared[fact.qualified_name] = fact

    for fact in facts:
        for f in fact.fields:
            f.type = _lookup(f.type, fact.namespaces, declared, fact)


def parse(text: str, context: GenerationContext | None = None) -> list[TypeFact]:
    """Parse a type fact description.

    Returns the declared types in declaration order. Field types refer
    directly to the declared facts, so the result may contain cycles.
    """
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/facts.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar)

    tree = _g_parser.parse(text)
    facts = TreeTransformer(context or GenerationContext()).transform(tree)
    link(facts)

    logger.debug("Parsed %d types", len(facts))
    return facts
