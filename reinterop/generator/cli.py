"""Command-line interface for reinterop type mapping."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace

import click
from lark.exceptions import UnexpectedInput
from rich.console import Console
from rich.table import Table

from reinterop.generator.classifier import CyclicTypeError, TypeNestingError, classify
from reinterop.generator.context import ConfigError, GenerationContext
from reinterop.generator.includes import EmitContext
from reinterop.generator.mapping import TypeMapping, map_types
from reinterop.generator.parser import ValidationError, parse
from reinterop.generator.preamble import render_preamble

_log = logging.getLogger("reinterop")

_USER_ERRORS = (ConfigError, ValidationError, CyclicTypeError, TypeNestingError, UnexpectedInput)


def _configure_logging(verbosity: int) -> None:
    """Set up the ``reinterop`` logger: 0 → WARNING, 1 → INFO, 2+ → DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    for old in list(_log.handlers):
        _log.removeHandler(old)
    _log.setLevel(level)
    _log.addHandler(handler)


def _load_context(config_file: str | None, base_namespace: str | None) -> GenerationContext:
    context = GenerationContext.load(config_file) if config_file else GenerationContext()
    if base_namespace is not None:
        context = replace(context, base_namespace=base_namespace)
    _log.info("Base namespace: %r", context.base_namespace)
    return context


def _read_input(input_file: str) -> str:
    with open(input_file, encoding="utf-8") as f:
        return f.read()


def _fail(error: Exception) -> None:
    print(f"Error: {error}")
    sys.exit(1)


def common_options(func):
    func = click.option(
        "--input",
        "-i",
        "input_file",
        required=True,
        type=click.Path(exists=True, dir_okay=False),
        help="Type fact description file",
    )(func)
    func = click.option(
        "--config",
        "config_file",
        default=None,
        type=click.Path(exists=True, dir_okay=False),
        help="JSON configuration file",
    )(func)
    func = click.option(
        "--base-namespace",
        envvar="REINTEROP_BASE_NAMESPACE",
        default=None,
        help="Outermost C++ namespace (overrides the configuration file)",
    )(func)
    func = click.option("--verbose", "-v", count=True, help="Increase log verbosity")(func)
    return func


@click.group()
def cli() -> None:
    """Reinterop C++ type mapper."""


@cli.command(name="map")
@common_options
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def map_command(
    input_file: str,
    config_file: str | None,
    base_namespace: str | None,
    verbose: int,
    output_json: bool,
) -> None:
    """Show how each declared type is represented in C++."""
    _configure_logging(verbose)
    try:
        context = _load_context(config_file, base_namespace)
        facts = parse(_read_input(input_file), context)
        mappings = map_types(facts, context)
    except _USER_ERRORS as e:
        _fail(e)
        return

    if output_json:
        print(json.dumps([m.to_dict() for m in mappings], indent=2))
    else:
        _output_plain(mappings)


def _header_strategy(mapping: TypeMapping) -> str:
    if mapping.forward_declaration is not None:
        return "forward declare"
    return mapping.header_include or ""


def _output_plain(mappings: list[TypeMapping]) -> None:
    """Output type mappings using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Types[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Kind", style="dim")
    table.add_column("C++ Type", style="yellow")
    table.add_column("Parameter", style="yellow")
    table.add_column("Interop", style="green")
    table.add_column("Header", style="dim")

    for mapping in mappings:
        table.add_row(
            mapping.name,
            mapping.kind,
            mapping.qualified_name,
            mapping.parameter_type,
            mapping.interop_type,
            _header_strategy(mapping),
        )

    console.print(table)


@cli.command()
@common_options
@click.option(
    "--context",
    "-c",
    "emit_context",
    type=click.Choice([c.value for c in EmitContext]),
    default=EmitContext.HEADER.value,
    help="Kind of file the preamble is for",
)
@click.option("--output", "-o", "output_file", default=None, help="Output file (default stdout)")
def preamble(
    input_file: str,
    config_file: str | None,
    base_namespace: str | None,
    verbose: int,
    emit_context: str,
    output_file: str | None,
) -> None:
    """Generate the includes and forward declarations for all declared types."""
    _configure_logging(verbose)
    try:
        context = _load_context(config_file, base_namespace)
        facts = parse(_read_input(input_file), context)
        types = [classify(fact, context) for fact in facts]
    except _USER_ERRORS as e:
        _fail(e)
        return

    generated = render_preamble(types, EmitContext(emit_context))

    if output_file is None:
        print(generated, end="")
    else:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(generated)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
