"""Main Typer application for patternkit."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from patternkit.builder import build as run_build
from patternkit.cli.errorhandler import handle_cli_errors
from patternkit.config import PatternkitConfig, load_config
from patternkit.logging_setup import configure_logging
from patternkit.model import Namespace
from patternkit.parse.patterns import parse_patterns
from patternkit.utils.async_utils import run_sync

app = typer.Typer(
    name="patternkit",
    help="Build pattern library collection pages from a directory of front-matter fragments",
    add_completion=False,
)

console = Console()

SiteRootOption = Annotated[
    Path,
    typer.Option("--site-root", "-s", help="Site directory containing .patternkit.toml"),
]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging and tracebacks")]


def _load(site_root: Path, dest: Path | None = None) -> PatternkitConfig:
    config = load_config(site_root.resolve())
    if dest is not None:
        config.dest = config.dest.model_copy(update={"root": dest.resolve()})
    return config


@app.command()
def build(
    site_root: SiteRootOption = Path(),
    dest: Annotated[Path | None, typer.Option("--dest", "-d", help="Output directory")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Render without writing files")] = False,
    debug: DebugOption = False,
) -> None:
    """Read sources, build the pattern tree, render and write collection pages."""
    configure_logging(debug=debug)
    with handle_cli_errors(debug=debug):
        config = _load(site_root, dest)
        result = run_build(config, write=not dry_run)

    collections = list(result.patterns.collections())
    table = Table(title="Build Summary")
    table.add_column("Collection", style="cyan")
    table.add_column("Patterns", justify="right")
    table.add_column("Hidden", justify="right", style="dim")
    for collection in collections:
        table.add_row(
            collection.id,
            str(len(collection.patterns)),
            str(len(collection.items) - len(collection.patterns)),
        )
    console.print(table)
    if dry_run:
        console.print("[yellow]Dry run: no files written.[/yellow]")
    else:
        console.print(f"[bold green]Wrote {len(result.written)} file(s)[/bold green] to {config.dest_root}")


def _add_namespace(branch: Tree, namespace: Namespace) -> None:
    if namespace.collection is not None:
        collection = namespace.collection
        node = branch.add(f"[bold]{collection.name}[/bold] [dim]{collection.id}[/dim]")
        visible = {pattern.id for pattern in collection.patterns}
        for pattern in collection.patterns:
            node.add(f"{pattern.name} [dim]{pattern.id}[/dim]")
        for pattern in collection.items.values():
            if pattern.id not in visible:
                node.add(f"[dim]{pattern.name} {pattern.id} (hidden)[/dim]")
    for child in namespace.children.values():
        _add_namespace(branch.add(f"[cyan]{child.key}/[/cyan]"), child)


@app.command()
def tree(
    site_root: SiteRootOption = Path(),
    as_json: Annotated[bool, typer.Option("--json", help="Print the tree as JSON")] = False,
    debug: DebugOption = False,
) -> None:
    """Show the pattern tree without rendering anything."""
    configure_logging(debug=debug)
    with handle_cli_errors(debug=debug):
        config = _load(site_root)
        patterns = run_sync(parse_patterns(config))

    if as_json:
        typer.echo(json.dumps(patterns.to_dict(), indent=2, default=str))
        return
    root = Tree(f"[cyan]{patterns.key}/[/cyan]")
    _add_namespace(root, patterns)
    console.print(root)


def main() -> None:
    app()
