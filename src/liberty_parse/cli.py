"""liberty-parse CLI - Command Line Interface.

This module provides the command-line interface for liberty-parse, allowing
users to parse, inspect, check and reformat Liberty (.lib) files.

The CLI is built using Typer and uses Rich for formatted output.

Typical usage example:

  $ liberty-parse parse my_tech.lib --output my_tech.json
  $ liberty-parse area my_tech.lib AND2
  $ cat my_tech.lib | liberty-parse reformat > formatted.lib
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .exceptions import ParseError, ValueKindError
from .log_utils import setup_logging
from .models.ast import LibertyAst
from .models.liberty import Liberty
from .parsers.liberty import LibertyParser
from .writer import format_liberty

app = typer.Typer(
    name="liberty-parse",
    help="liberty-parse: Liberty cell library parser",
    no_args_is_help=True,
)
console = Console()

logger = logging.getLogger("liberty_parse.cli")


@app.callback(invoke_without_command=False)
def main(
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress debug logs (show warnings/errors only)"
    ),
):
    """liberty-parse: Liberty cell library parser."""
    setup_logging(quiet=quiet)


def _report_parse_error(source: str, err: ParseError) -> None:
    console.print(f"[red]Error:[/red] Failed to parse {escape(source)}")
    console.print(err.rendered, markup=False, highlight=False)


def load_ast(file: Path, parser: Optional[LibertyParser] = None) -> LibertyAst:
    """Parses a Liberty file for a command, exiting with status 1 on failure.

    Args:
        file: Path to the Liberty file (plain or .gz).
        parser: Parser to use (a default LibertyParser if omitted).

    Returns:
        The raw document tree.

    Raises:
        typer.Exit: If the file is missing or cannot be parsed.
    """
    if not file.exists():
        console.print(f"[red]Error:[/red] File not found: {escape(str(file))}")
        raise typer.Exit(1)

    parser = parser or LibertyParser()
    try:
        return parser.parse(file)
    except ParseError as err:
        _report_parse_error(str(file), err)
        raise typer.Exit(1)
    except UnicodeDecodeError as err:
        console.print(f"[red]Error:[/red] {escape(str(file))} is not valid UTF-8: {err}")
        raise typer.Exit(1)


@app.command()
def parse(
    file: Path = typer.Argument(..., help="Path to Liberty file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSON file"),
):
    """Parses a Liberty file and displays a summary.

    Shows, for every library in the file, the number of cells, groups and
    library-level attributes, and optionally saves the structured model as JSON.

    Args:
        file: The path to the Liberty file to parse.
        output: Optional. Path to save the structured model as a JSON file.

    Raises:
        typer.Exit: If the file is not found or cannot be parsed.
    """
    logger.info(f"Starting parse for {file}")
    lib = Liberty.from_ast(load_ast(file))

    table = Table(title="Liberty Summary")
    table.add_column("Library")
    table.add_column("Cells", justify="right")
    table.add_column("Groups", justify="right")
    table.add_column("Attributes", justify="right")
    for group in lib.libraries:
        table.add_row(
            escape(group.name),
            str(sum(1 for _ in group.iter_subgroups_of_kind("cell"))),
            str(len(group.subgroups)),
            str(len(group.attributes)),
        )
    console.print(table)

    if output:
        output.write_text(lib.model_dump_json(indent=2))
        console.print(f"[green]Saved to:[/green] {escape(str(output))}")


@app.command()
def cells(file: Path = typer.Argument(..., help="Path to Liberty file")):
    """Lists the cells of every library in a Liberty file."""
    ast = load_ast(file)
    for block in ast.libraries:
        console.print(f"[bold]Library:[/bold] {escape(block.name)}")
        for child in block.blocks():
            if child.kind == "cell":
                console.print(f"  Cell: {escape(child.name)}")


@app.command()
def groups(file: Path = typer.Argument(..., help="Path to Liberty file")):
    """Counts the groups directly inside every library."""
    ast = load_ast(file)
    console.print(f"Found {len(ast.libraries)} libraries")
    for block in ast.libraries:
        console.print(f"Library '{escape(block.name)}' has {len(block.blocks())} groups")


@app.command()
def area(
    file: Path = typer.Argument(..., help="Path to Liberty file"),
    cell: str = typer.Argument(..., help="Cell name"),
    library: Optional[str] = typer.Option(
        None, "--library", "-l", help="Library name (default: first library)"
    ),
):
    """Prints the area of a cell.

    Raises:
        typer.Exit: If the library, the cell or its area cannot be found.
    """
    lib = Liberty.from_ast(load_ast(file))

    if library is not None:
        group = lib.get_library(library)
    else:
        group = lib.libraries[0] if lib.libraries else None
    if group is None:
        console.print(f"[red]Error:[/red] Library not found: {escape(library or str(file))}")
        raise typer.Exit(1)

    found = group.get_cell(cell)
    if found is None:
        console.print(f"[red]Error:[/red] Cell not found: {escape(cell)}")
        raise typer.Exit(1)

    value = found.simple_attribute("area")
    try:
        cell_area = value.as_number() if value is not None else None
    except ValueKindError as err:
        console.print(f"[red]Error:[/red] Cell {escape(cell)} has a non-numeric area: {err}")
        raise typer.Exit(1)
    if cell_area is None:
        console.print(f"[yellow]Warning:[/yellow] Cell {escape(cell)} has no area")
        raise typer.Exit(1)

    console.print(f"Cell {escape(cell)} has area: {cell_area}")


@app.command()
def reformat(
    file: Optional[Path] = typer.Argument(None, help="Path to Liberty file (default: stdin)"),
    raw: bool = typer.Option(
        False, "--raw", help="Keep comments and repeated attributes (format the raw tree)"
    ),
):
    """Parses Liberty text and prints it back in canonical formatting.

    Without --raw the structured model is written: repeated attributes are
    merged and comments are dropped.
    """
    if file is None:
        parser = LibertyParser()
        try:
            ast = parser.parse_string(sys.stdin.read())
        except ParseError as err:
            _report_parse_error("<stdin>", err)
            raise typer.Exit(1)
    else:
        ast = load_ast(file)

    doc = ast if raw else Liberty.from_ast(ast)
    typer.echo(format_liberty(doc))


@app.command()
def check(file: Path = typer.Argument(..., help="Path to Liberty file")):
    """Reports repeated attribute, cell and pin names.

    The structured model keeps only the last value of a repeated attribute and
    only the first of several same-named cells or pins is found by name; this
    command lists such places.
    """
    parser = LibertyParser()
    ast = load_ast(file, parser)
    warnings = parser.validate(ast)
    if not warnings:
        console.print(
            Panel.fit(f"[bold green]No issues found[/] in {escape(str(file))}", title="Check")
        )
        return
    for w in warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(w)}")


if __name__ == "__main__":
    app()
