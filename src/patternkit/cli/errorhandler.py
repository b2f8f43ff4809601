"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer
from rich.console import Console

from patternkit.exceptions import (
    ConfigError,
    OutputWriteError,
    ParseError,
    PatternkitError,
    ReservedPropertyError,
    ResourceCollisionError,
    TemplateRenderError,
    UnresolvedLayoutError,
)

console = Console(stderr=True)


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Turn patternkit errors into a one-line message and exit code 1.

    Args:
        debug: If True, re-raise so the full traceback is shown.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit):
        raise
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ReservedPropertyError as e:
        if debug:
            raise
        console.print(f"[bold red]Reserved Property:[/bold red] {e}")
        console.print("Remove the property from the file's front matter; patternkit sets it itself.")
        raise typer.Exit(1) from e
    except (ParseError, ResourceCollisionError) as e:
        if debug:
            raise
        console.print(f"[bold red]Parse Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except (UnresolvedLayoutError, TemplateRenderError) as e:
        if debug:
            raise
        console.print(f"[bold red]Render Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except OutputWriteError as e:
        if debug:
            raise
        console.print(f"[bold red]Write Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except PatternkitError as e:
        if debug:
            raise
        console.print(f"[bold red]Build Failed:[/bold red] {e}")
        raise typer.Exit(1) from e
