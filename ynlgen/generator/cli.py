"""Command-line interface for ynlgen code generation."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.table import Table

from ynlgen.generator import python
from ynlgen.generator.parser import ParseError, parse_file
from ynlgen.generator.resolver import AttributeIndex, InconsistentSpecError

if TYPE_CHECKING:
    from ynlgen.generator.python import MethodView
    from ynlgen.generator.types import Spec

err_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]error:[/bold red] {message}", highlight=False, soft_wrap=True)
    sys.exit(1)


def _load(spec_file: str) -> Spec:
    try:
        return parse_file(spec_file)
    except OSError as e:
        _fail(f"failed to open file: {e}")
    except ParseError as e:
        _fail(f"failed to parse YAML netlink file: {e}")


@click.group()
def cli() -> None:
    """Generate Python bindings from YAML netlink specifications."""


@cli.command()
@click.argument("spec_file", metavar="SPEC")
@click.option(
    "--package",
    "-p",
    default=None,
    help="Name for the generated module (default: use the YAML netlink spec name)",
)
@click.option(
    "--output",
    "-o",
    "output_file",
    default="-",
    help="Output file (default: stdout)",
)
@click.option(
    "--runtime-import",
    "runtime_import",
    default=python.DEFAULT_RUNTIME_IMPORT,
    show_default=True,
    help="Import path of the runtime package used by generated code",
)
def gen(spec_file: str, package: str | None, output_file: str, runtime_import: str) -> None:
    """Generate Python bindings from a YAML netlink SPEC file."""
    spec = _load(spec_file)

    try:
        code = python.render(spec, python.Config(package=package, runtime_import=runtime_import))
    except InconsistentSpecError as e:
        _fail(f"failed to generate code: {e}")

    if output_file == "-":
        click.echo(code, nl=False)
        return

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(code)


@cli.command()
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option("--name", default="ynl_runtime", help="Runtime package name")
def runtime(output_path: str, name: str) -> None:
    """Write the runtime package used by generated code."""
    runtime_dir = Path(output_path) / name
    runtime_dir.mkdir(parents=True, exist_ok=True)
    for filename, content in python.runtime().items():
        (runtime_dir / filename).write_text(content)
    print(f"Generated Python runtime in {runtime_dir}")


@cli.command()
@click.argument("spec_file", metavar="SPEC")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(spec_file: str, output_json: bool) -> None:
    """Display the attribute sets and bindings of a YAML netlink SPEC."""
    spec = _load(spec_file)

    try:
        methods = python.plan(spec, AttributeIndex(spec))
    except InconsistentSpecError as e:
        _fail(f"failed to plan bindings: {e}")

    if output_json:
        _output_json(spec, methods)
    else:
        _output_plain(spec, methods)


def _bindings(spec: Spec, methods: list[MethodView]) -> dict[str, list[str]]:
    """Map each operation name to the methods generated for it."""
    result: dict[str, list[str]] = {op.name: [] for op in spec.operations.list_}
    for method in methods:
        result[method.operation.name].append(method.name)
    return result


def _unimplemented(methods: list[MethodView]) -> list[str]:
    seen: dict[str, None] = {}
    for method in methods:
        for record in method.records:
            for field in record.fields:
                if field.scalar is None:
                    seen[f"{field.attr.name} ({field.attr.type})"] = None
    return list(seen)


def _output_json(spec: Spec, methods: list[MethodView]) -> None:
    """Output spec info as JSON."""
    bindings = _bindings(spec, methods)
    data: dict = {
        "family": {
            "name": spec.name,
            "protocol": spec.protocol,
            "uapi_header": spec.uapi_header,
        },
        "attribute_sets": {
            aset.name: {
                "name_prefix": aset.name_prefix,
                "attributes": len(aset.attributes),
            }
            for aset in spec.attribute_sets
        },
        "operations": {
            op.name: {
                "attribute_set": op.attribute_set,
                "notify": op.notify,
                "methods": bindings[op.name],
            }
            for op in spec.operations.list_
        },
        "unimplemented": _unimplemented(methods),
    }

    print(json.dumps(data, indent=2))


def _output_plain(spec: Spec, methods: list[MethodView]) -> None:
    """Output spec info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]Family[/bold cyan] {spec.name}", highlight=False)
    family_table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    family_table.add_column("Label", style="dim")
    family_table.add_column("Value", style="white")
    family_table.add_row("Protocol", spec.protocol or "-")
    family_table.add_row("UAPI header", spec.uapi_header or "-")
    console.print(family_table)
    console.print()

    console.print("[bold cyan]Attribute sets[/bold cyan]")
    set_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    set_table.add_column("Name", style="white")
    set_table.add_column("Prefix", style="dim")
    set_table.add_column("Attributes", style="yellow", justify="right")
    for aset in spec.attribute_sets:
        set_table.add_row(aset.name, aset.name_prefix, str(len(aset.attributes)))
    console.print(set_table)
    console.print()

    console.print("[bold cyan]Operations[/bold cyan]")
    op_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    op_table.add_column("Name", style="white")
    op_table.add_column("Attribute set", style="dim")
    op_table.add_column("Methods", style="green")
    op_table.add_column("Notify", style="dim")
    bindings = _bindings(spec, methods)
    for op in spec.operations.list_:
        op_table.add_row(op.name, op.attribute_set, ", ".join(bindings[op.name]), op.notify)
    console.print(op_table)

    unimplemented = _unimplemented(methods)
    if unimplemented:
        console.print()
        console.print("[bold yellow]Unimplemented attributes[/bold yellow]")
        for name in unimplemented:
            console.print(f"  {name}", highlight=False)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
