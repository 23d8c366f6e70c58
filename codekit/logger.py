"""Console logging for codekit.

Core modules only emit debug and warning events here, both on stderr so
JSON output on stdout stays parseable. Rendering of results (tables,
summaries, JSON) belongs to the CLI layer.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_verbose = False


def set_verbose(value: bool) -> None:
    """Enable or disable debug output."""
    global _verbose
    _verbose = value


def debug(message: str) -> None:
    if _verbose:
        err_console.print(f"[dim]\\[debug] {escape(message)}[/dim]")


def warn(message: str) -> None:
    err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def output_json(data: Any) -> None:
    """Print data as indented JSON without markup processing."""
    console.print(
        json.dumps(data, indent=2, default=str),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
