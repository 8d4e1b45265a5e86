"""Summary of everything an emitter needs to use a managed type from C++."""

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin

from .classifier import classify
from .context import GenerationContext
from .conversions import from_interop, to_interop
from .includes import add_header_includes, add_source_includes, forward_declaration
from .types import TypeFact

SAMPLE_VARIABLE = "value"


@dataclass
class TypeMapping(DataClassJsonMixin):
    """C++ spellings for one managed type.

    to_interop/from_interop convert a variable named `value`. The include
    fields are None when the type needs no include in that kind of file.
    """

    name: str
    kind: str
    qualified_name: str
    return_type: str
    parameter_type: str
    interop_type: str
    to_interop: str
    from_interop: str
    forward_declarable: bool
    forward_declaration: str | None
    header_include: str | None
    source_include: str | None


def _single_include(includes: set[str]) -> str | None:
    return ", ".join(sorted(includes)) if includes else None


def describe(fact: TypeFact, context: GenerationContext) -> TypeMapping:
    """Classify a type and collect its C++ spellings."""
    t = classify(fact, context)

    header_includes: set[str] = set()
    source_includes: set[str] = set()
    add_header_includes(t, header_includes)
    add_source_includes(t, source_includes)

    return TypeMapping(
        name=fact.qualified_name,
        kind=t.kind.value,
        qualified_name=t.fully_qualified_name(),
        return_type=t.as_return_type().fully_qualified_name(),
        parameter_type=t.as_parameter_type().fully_qualified_name(),
        interop_type=t.as_interop_type().fully_qualified_name(),
        to_interop=to_interop(t, SAMPLE_VARIABLE, context),
        from_interop=from_interop(t, SAMPLE_VARIABLE, context),
        forward_declarable=t.can_be_forward_declared,
        forward_declaration=forward_declaration(t),
        header_include=_single_include(header_includes),
        source_include=_single_include(source_includes),
    )


def map_types(facts: list[TypeFact], context: GenerationContext) -> list[TypeMapping]:
    return [describe(fact, context) for fact in facts]
