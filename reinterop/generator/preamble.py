"""Rendering of the include and forward declaration block of a generated file."""

from jinja2 import Environment, PackageLoader

from .cpptype import CppType
from .includes import EmitContext, IncludeSet

env = Environment(
    loader=PackageLoader("reinterop.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("preamble.j2")


def render_preamble(types: list[CppType], context: EmitContext) -> str:
    """Render the includes and forward declarations needed by `types`.

    Headers forward declare whatever they can; source files include the
    full definition of every type.
    """
    include_set = IncludeSet(context)
    include_set.add_all(types)

    return template.render(
        context=context.value,
        includes=include_set.sorted_includes(),
        forward_declarations=include_set.sorted_forward_declarations(),
    )
