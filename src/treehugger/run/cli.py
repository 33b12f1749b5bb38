#!/usr/bin/env python3

"""Query and rewrite JavaScript/TypeScript files from the command line."""

import difflib
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from treehugger.config import DEFAULT_CONFIG_FILE, load_config
from treehugger.exceptions import LanguageError, TransformError
from treehugger.languages import SUPPORTED_LANGUAGES, detect_language
from treehugger.tree import TreeHugger
from treehugger.utils.log import logger, set_level

_console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_CONFIG_SPEC_HELP_TEXT = f"""Path to config files or key-value pairs, merged in order over the built-in defaults ({DEFAULT_CONFIG_FILE.name}).

Examples:

[bold green]-c treehugger.yaml[/bold green]

[bold green]-c language=tsx -c method_spacing=0[/bold green]
"""

app = typer.Typer(rich_markup_mode="rich", add_completion=False, help="CSS-like queries and rewrites for JS/TS sources.")


def _load(path: Path, language: str | None, config_spec: list[str]) -> TreeHugger:
    try:
        config = load_config(*config_spec)
    except (ValueError, FileNotFoundError) as e:
        _err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(2)
    set_level(config.log_level)
    if not path.is_file():
        _err_console.print(f"[bold red]Error:[/bold red] no such file: {escape(str(path))}")
        raise typer.Exit(2)
    language = language or detect_language(path.name) or config.language
    try:
        tree = TreeHugger(path.read_text(encoding="utf-8"), language, config=config)
    except LanguageError as e:
        _err_console.print(f"[bold red]Error:[/bold red] {escape(e.message)}")
        raise typer.Exit(2)
    if tree.has_error:
        logger.warning(f"{path}: source contains syntax errors, results may be partial")
    return tree


def _split_pair(value: str, option: str) -> tuple[str, str]:
    if "=" not in value:
        raise typer.BadParameter(f"expected OLD=NEW, got {value!r}", param_hint=option)
    old, new = value.split("=", 1)
    if not old or not new:
        raise typer.BadParameter(f"expected OLD=NEW, got {value!r}", param_hint=option)
    return old, new


def _preview(text: str, width: int = 60) -> str:
    first = text.strip().splitlines()[0] if text.strip() else ""
    return first if len(first) <= width else first[: width - 3] + "..."


# fmt: off
@app.command(help="Print the nodes matching PATTERN in FILE.")
def find(
    file: Path = typer.Argument(..., help="JavaScript or TypeScript source file"),
    pattern: str = typer.Argument(..., help="Selector, e.g. 'function[async]' or 'class_declaration method_definition'"),
    language: str | None = typer.Option(None, "-l", "--language", help=f"Grammar to use ({', '.join(SUPPORTED_LANGUAGES)})"),
    count: bool = typer.Option(False, "--count", help="Only print the number of matches"),
    as_json: bool = typer.Option(False, "--json", help="Print matches as JSON"),
    config_spec: list[str] = typer.Option([], "-c", "--config", help=_CONFIG_SPEC_HELP_TEXT),
) -> None:
    # fmt: on
    tree = _load(file, language, config_spec)
    matches = tree.find_all(pattern)

    if count:
        _console.print(len(matches))
        return
    if as_json:
        rows = [
            {
                "type": node.type,
                "name": node.name,
                "line": node.line,
                "column": node.column,
                "end_line": node.end_line,
                "end_column": node.end_column,
                "text": node.text,
            }
            for node in matches
        ]
        _console.print_json(json.dumps(rows))
        return

    table = Table(title=escape(f"{len(matches)} match(es) for {pattern!r}"), title_justify="left")
    table.add_column("Type", style="cyan")
    table.add_column("Position", style="magenta")
    table.add_column("Text")
    for node in matches:
        table.add_row(node.type, f"{node.line}:{node.column}", Text(_preview(node.text)))
    _console.print(table)


# fmt: off
@app.command(name="transform", help="Rewrite FILE and print the result (or a diff, or write it back).")
def transform_file(
    file: Path = typer.Argument(..., help="JavaScript or TypeScript source file"),
    rename: list[str] = typer.Option([], "--rename", help="OLD=NEW: rename identifiers outside strings and comments", rich_help_panel="Operations"),
    rename_identifier: list[str] = typer.Option([], "--rename-identifier", help="OLD=NEW: rename every bare identifier", rich_help_panel="Operations"),
    remove: list[str] = typer.Option([], "--remove", help="Selector or call shorthand (e.g. console.log) to delete", rich_help_panel="Operations"),
    whole_statement: bool = typer.Option(False, "--whole-statement", help="With --remove: take the enclosing statement line when the match is its whole expression", rich_help_panel="Operations"),
    remove_unused_imports: bool = typer.Option(False, "--remove-unused-imports", help="Drop unused import bindings", rich_help_panel="Operations"),
    language: str | None = typer.Option(None, "-l", "--language", help=f"Grammar to use ({', '.join(SUPPORTED_LANGUAGES)})", rich_help_panel="Output"),
    write: bool = typer.Option(False, "-w", "--write", help="Write the result back to FILE", rich_help_panel="Output"),
    diff: bool = typer.Option(False, "--diff", help="Print a unified diff instead of the full result", rich_help_panel="Output"),
    config_spec: list[str] = typer.Option([], "-c", "--config", help=_CONFIG_SPEC_HELP_TEXT),
) -> None:
    # fmt: on
    tree = _load(file, language, config_spec)
    session = tree.transform()
    for value in rename:
        session.rename(*_split_pair(value, "--rename"))
    for value in rename_identifier:
        session.rename_identifier(*_split_pair(value, "--rename-identifier"))
    for pattern in remove:
        session.remove(pattern, whole_statement=whole_statement)
    if remove_unused_imports:
        session.remove_unused_imports()

    try:
        result = session.render()
    except TransformError as e:
        _err_console.print(f"[bold red]Transform failed:[/bold red] {escape(e.message)}")
        raise typer.Exit(1)

    logger.info(f"{file}: {len(session.edits)} edit(s)")
    if write:
        file.write_text(result, encoding="utf-8")
        _err_console.print(f"[green]Wrote {escape(str(file))} ({len(session.edits)} edit(s))[/green]")
    elif diff:
        lines = difflib.unified_diff(
            tree.source.splitlines(keepends=True),
            result.splitlines(keepends=True),
            fromfile=f"a/{file.name}",
            tofile=f"b/{file.name}",
        )
        typer.echo("".join(lines), nl=False)
    else:
        typer.echo(result, nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
