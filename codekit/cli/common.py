"""Shared CLI utilities for codekit commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.markup import escape

from codekit.exceptions import CodekitError
from codekit.logger import console, err_console


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn codekit errors into a one-line message and exit status 1."""
    try:
        yield
    except CodekitError as e:
        print_error(str(e))
        raise typer.Exit(1)


def print_summary(label: str, names: list[str], style: str) -> None:
    if names:
        console.print(f"[{style}]{label}:[/{style}] {escape(', '.join(names))}")
