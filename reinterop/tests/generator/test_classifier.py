"""Tests for type classification and blittability."""

import logging
import time

import pytest

from reinterop.generator import GenerationContext, cpptype, parse
from reinterop.generator.classifier import (
    MAX_NESTING_DEPTH,
    CyclicTypeError,
    TypeNestingError,
    classify,
    is_blittable,
    namespace_path,
)
from reinterop.generator.cpptype import CppTypeFlags, CppTypeKind
from reinterop.generator.types import (
    FactKind,
    FieldFact,
    SpecialType,
    TypeFact,
    pointer_fact,
    special_fact,
)


def _struct(name, *field_types, namespaces=None):
    return TypeFact(
        kind=FactKind.NAMED,
        name=name,
        is_value_type=True,
        namespaces=list(namespaces or []),
        fields=[FieldFact(f"f{i}", t) for i, t in enumerate(field_types)],
    )


def _doubled_chain(depth, leaf):
    """Build S0..S{depth-1}, each holding two fields of the next level."""
    fact = leaf
    for i in reversed(range(depth)):
        fact = _struct(f"S{i}", fact, fact)
    return fact


def _chain(depth, leaf):
    fact = leaf
    for i in reversed(range(depth)):
        fact = _struct(f"S{i}", fact)
    return fact


def describe_special_types():
    def maps_integers_to_fixed_width_types(expect, context):
        expected = {
            SpecialType.SBYTE: cpptype.INT8,
            SpecialType.BYTE: cpptype.UINT8,
            SpecialType.INT16: cpptype.INT16,
            SpecialType.UINT16: cpptype.UINT16,
            SpecialType.INT32: cpptype.INT32,
            SpecialType.UINT32: cpptype.UINT32,
            SpecialType.INT64: cpptype.INT64,
            SpecialType.UINT64: cpptype.UINT64,
        }
        for special, t in expected.items():
            expect(classify(special_fact(special), context) is t) == True

    def maps_other_scalars(expect, context):
        expected = {
            SpecialType.SINGLE: cpptype.SINGLE,
            SpecialType.DOUBLE: cpptype.DOUBLE,
            SpecialType.BOOLEAN: cpptype.BOOLEAN,
            SpecialType.VOID: cpptype.VOID,
            SpecialType.NULLPTR: cpptype.NULL_POINTER,
            SpecialType.INTPTR: cpptype.VOID_POINTER,
            SpecialType.UINTPTR: cpptype.VOID_POINTER,
        }
        for special, t in expected.items():
            expect(classify(special_fact(special), context) is t) == True

    def treats_unmapped_special_types_as_named(expect, context):
        t = classify(special_fact(SpecialType.STRING), context)
        expect(t.kind) == CppTypeKind.CLASS_WRAPPER
        expect(t.fully_qualified_name()) == "::DotNet::System::String"


def describe_pointers():
    def applies_pointer_to_pointed_at_type(expect, context):
        t = classify(pointer_fact(special_fact(SpecialType.INT32)), context)
        expect(t.fully_qualified_name()) == "::std::int32_t*"
        expect(t.flags) == CppTypeFlags.POINTER

    def keeps_kind_of_pointed_at_type(expect, geo, context):
        t = classify(pointer_fact(geo["Cartographic"]), context)
        expect(t.kind) == CppTypeKind.BLITTABLE_STRUCT
        expect(t.is_pointer) == True


def describe_namespace_path():
    def prepends_base_namespace(expect, geo, context):
        expect(namespace_path(geo["Cartographic"], context)) == ["DotNet", "Cesium", "Geo"]

    def uses_base_namespace_for_global_types(expect, geo, context):
        expect(namespace_path(geo["Registry"], context)) == ["DotNet"]

    def omits_empty_base_namespace(expect):
        fact = _struct("Point", namespaces=["Geo"])
        expect(namespace_path(fact, GenerationContext(base_namespace=""))) == ["Geo"]

    def skips_empty_segments(expect, context):
        fact = _struct("Point", namespaces=["", "Geo"])
        expect(namespace_path(fact, context)) == ["DotNet", "Geo"]

    def drops_one_leading_duplicate(expect):
        fact = _struct("Name", namespaces=["Foo", "Foo", "Bar"])
        context = GenerationContext(base_namespace="")
        expect(namespace_path(fact, context)) == ["Foo", "Bar"]

    def does_not_deduplicate_recursively(expect):
        fact = _struct("Name", namespaces=["Foo", "Foo", "Bar"])
        context = GenerationContext(base_namespace="Foo")
        expect(namespace_path(fact, context)) == ["Foo", "Foo", "Bar"]

    def merges_base_with_matching_managed_namespace(expect):
        fact = _struct("Globe", namespaces=["Cesium"])
        context = GenerationContext(base_namespace="Cesium")
        expect(classify(fact, context).fully_qualified_name()) == "::Cesium::Globe"


def describe_kinds():
    def classifies_enum_by_base_type(expect, geo, context):
        expect(classify(geo["Mode"], context).kind) == CppTypeKind.ENUM

    def uses_configured_enum_base_type(expect):
        context = GenerationContext(enum_base_type="Java.Lang.Enum")
        fact = TypeFact(FactKind.NAMED, "Color", is_value_type=True, base_type="System.Enum")
        expect(classify(fact, context).kind) == CppTypeKind.BLITTABLE_STRUCT
        fact.base_type = "Java.Lang.Enum"
        expect(classify(fact, context).kind) == CppTypeKind.ENUM

    def classifies_reference_types_as_class_wrappers(expect, geo, context):
        t = classify(geo["Anchor"], context)
        expect(t.kind) == CppTypeKind.CLASS_WRAPPER
        expect(t.name) == "Anchor"
        expect(t.namespace.segments) == ("DotNet", "Cesium", "Geo")

    def classifies_blittable_value_types(expect, geo, context):
        expect(classify(geo["Cartographic"], context).kind) == CppTypeKind.BLITTABLE_STRUCT
        expect(classify(geo["Sample"], context).kind) == CppTypeKind.BLITTABLE_STRUCT

    def classifies_int_and_float_struct_as_blittable(expect, context):
        fact = _struct(
            "Pair", special_fact(SpecialType.INT32), special_fact(SpecialType.SINGLE)
        )
        expect(classify(fact, context).kind) == CppTypeKind.BLITTABLE_STRUCT

    def classifies_struct_with_reference_field_as_wrapper(expect, geo, context):
        expect(classify(geo["Placement"], context).kind) == (
            CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER
        )
        fact = _struct("Named", special_fact(SpecialType.STRING))
        expect(classify(fact, context).kind) == CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER

    def degrades_unresolved_references_silently(expect, context):
        fact = TypeFact(FactKind.REF, "Mystery", namespaces=["Somewhere"])
        t = classify(fact, context)
        expect(t.kind) == CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER
        expect(t.fully_qualified_name()) == "::DotNet::Somewhere::Mystery"

    def creates_a_new_descriptor_each_time(expect, geo, context):
        first = classify(geo["Anchor"], context)
        second = classify(geo["Anchor"], context)
        expect(first) == second
        expect(first is second) == False

    def does_not_derive_generic_arguments(expect, geo, context):
        expect(classify(geo["Anchor"], context).generic_arguments) == None

    def logs_each_classification(expect, caplog, geo, context):
        caplog.set_level(logging.DEBUG, logger="reinterop.generator.classifier")
        classify(geo["Cartographic"], context)
        messages = [
            r.getMessage() for r in caplog.records if r.name == "reinterop.generator.classifier"
        ]
        expect(messages) == [
            "Cesium.Geo.Cartographic is blittable",
            "Classified Cesium.Geo.Cartographic as ::DotNet::Cesium::Geo::Cartographic"
            " (blittable_struct)",
        ]


def describe_blittability():
    def accepts_scalar_allow_list(expect, context):
        for special in (
            SpecialType.BYTE,
            SpecialType.SBYTE,
            SpecialType.INT64,
            SpecialType.UINTPTR,
            SpecialType.DOUBLE,
            SpecialType.BOOLEAN,
        ):
            expect(is_blittable(special_fact(special), context)) == True

    def rejects_reference_types(expect, geo, context):
        expect(is_blittable(special_fact(SpecialType.OBJECT), context)) == False
        expect(is_blittable(geo["Anchor"], context)) == False

    def accepts_nested_blittable_structs(expect, geo, context):
        outer = _struct("Outer", geo["Cartographic"], special_fact(SpecialType.INT16))
        expect(is_blittable(outer, context)) == True

    def rejects_nested_non_blittable_structs(expect, geo, context):
        outer = _struct("Outer", geo["Placement"])
        expect(is_blittable(outer, context)) == False

    def accepts_enum_fields(expect, geo, context):
        expect(is_blittable(_struct("Flags", geo["Mode"]), context)) == True

    def accepts_pointer_to_self(expect, geo, context):
        expect(is_blittable(geo["Sample"], context)) == True

    def ignores_static_fields(expect, context):
        fact = _struct("Counter", special_fact(SpecialType.INT32))
        fact.fields.append(FieldFact("shared", special_fact(SpecialType.STRING), is_static=True))
        expect(is_blittable(fact, context)) == True

    def accepts_type_reached_twice(expect, geo, context):
        fact = _struct("Segment", geo["Cartographic"], geo["Cartographic"])
        expect(is_blittable(fact, context)) == True

    def checks_shared_fields_once(expect, context):
        fact = _doubled_chain(30, special_fact(SpecialType.INT32))
        start = time.perf_counter()
        expect(is_blittable(fact, context)) == True
        expect(time.perf_counter() - start < 1.0) == True

    def reuses_non_blittable_verdicts(expect, context):
        fact = _doubled_chain(30, special_fact(SpecialType.STRING))
        start = time.perf_counter()
        expect(classify(fact, context).kind) == CppTypeKind.NON_BLITTABLE_STRUCT_WRAPPER
        expect(time.perf_counter() - start < 1.0) == True

    def logs_each_struct_verdict_once(expect, caplog, context):
        caplog.set_level(logging.DEBUG, logger="reinterop.generator.classifier")
        is_blittable(_doubled_chain(3, special_fact(SpecialType.INT32)), context)
        verdicts = [r.getMessage() for r in caplog.records if " is " in r.getMessage()]
        expect(verdicts) == [
            "S2 is blittable",
            "S1 is blittable",
            "S0 is blittable",
        ]


def describe_nesting_depth():
    def accepts_deep_chain_within_limit(expect, context):
        fact = _chain(MAX_NESTING_DEPTH, special_fact(SpecialType.INT32))
        expect(is_blittable(fact, context)) == True

    def rejects_chain_beyond_limit(expect, context):
        fact = _chain(1500, special_fact(SpecialType.INT32))
        with pytest.raises(TypeNestingError) as e:
            classify(fact, context)
        expect(e.value.outermost) == "S0"
        expect(e.value.innermost) == f"S{MAX_NESTING_DEPTH}"


def describe_cyclic_types():
    def reports_self_containing_struct(expect, context):
        (node,) = parse("struct Node { next: Node }", context)
        with pytest.raises(CyclicTypeError) as e:
            is_blittable(node, context)
        expect(e.value.cycle) == ["Node", "Node"]

    def reports_indirect_cycle(expect, context):
        node, _link = parse("struct Node { child: Link } struct Link { node: Node }", context)
        with pytest.raises(CyclicTypeError) as e:
            classify(node, context)
        expect(e.value.cycle) == ["Node", "Link", "Node"]
        expect(str(e.value)) == "Value type contains itself: Node -> Link -> Node"

    def reports_cycle_below_the_classified_type(expect, context):
        facts = parse(
            """
            namespace Ring {
                struct Holder { inner: Loop }
                struct Loop { again: Loop }
            }
            """,
            context,
        )
        with pytest.raises(CyclicTypeError) as e:
            classify(facts[0], context)
        expect(e.value.cycle) == ["Ring.Loop", "Ring.Loop"]

    def does_not_visit_reference_type_cycles(expect, context):
        facts = parse("class Tree { parent: Tree }", context)
        expect(classify(facts[0], context).kind) == CppTypeKind.CLASS_WRAPPER
