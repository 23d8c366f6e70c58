"""sources subcommands: manage external skill repositories."""

from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from codekit import logger
from codekit.cli.common import handle_errors, print_summary
from codekit.core.registry import get_settings
from codekit.logger import console
from codekit.sources import SourceManager

app = typer.Typer(
    help="Manage external git sources that publish skills.",
    no_args_is_help=True,
)


def _manager() -> SourceManager:
    with handle_errors():
        return SourceManager(get_settings())


@app.command("add")
def add_source(
    url: Annotated[str, typer.Argument(help="Git URL of the repository.")],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Source name (defaults to the repository name)."),
    ] = None,
    branch: Annotated[
        str,
        typer.Option("--branch", "-b", help="Branch to clone."),
    ] = "main",
    skills_dir: Annotated[
        str,
        typer.Option("--skills-dir", help="Directory holding skills inside the repository."),
    ] = "skills",
) -> None:
    """Register a source.

    Examples:
      codekit sources add https://github.com/anthropics/skills.git
      codekit sources add git@github.com:me/skills.git --branch dev
    """
    manager = _manager()
    with handle_errors():
        source = manager.add_source(url, name=name, branch=branch, skills_dir=skills_dir)
    console.print(f"[green]Added source[/green] [cyan]{escape(source.name)}[/cyan]")
    console.print("[dim]Run 'codekit sources pull' to clone it.[/dim]")


@app.command("remove")
def remove_source(
    name: Annotated[str, typer.Argument(help="Name of the source.")],
    delete_clone: Annotated[
        bool,
        typer.Option("--delete-clone", help="Also delete the local clone."),
    ] = False,
) -> None:
    """Unregister a source."""
    manager = _manager()
    with handle_errors():
        manager.remove_source(name, delete_clone=delete_clone)
    console.print(f"[green]Removed source[/green] [cyan]{escape(name)}[/cyan]")


@app.command("list")
def list_sources(
    as_json: Annotated[bool, typer.Option("--json", help="Print machine-readable JSON.")] = False,
) -> None:
    """List configured sources."""
    manager = _manager()
    with handle_errors():
        statuses = manager.list_sources()

    if as_json:
        logger.output_json([status.to_dict() for status in statuses])
        return

    if not statuses:
        console.print("[dim]No sources configured.[/dim]")
        return

    table = Table()
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("URL")
    table.add_column("Branch")
    table.add_column("Skills", justify="right")
    table.add_column("Cloned")
    for status in statuses:
        table.add_row(
            escape(status.source.name),
            escape(status.source.url),
            escape(status.source.branch),
            str(status.skills),
            "[green]yes[/green]" if status.cloned else "[yellow]no[/yellow]",
        )
    console.print(table)


@app.command("pull")
def pull_sources(
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="Only pull this source."),
    ] = None,
) -> None:
    """Clone or update source repositories."""
    manager = _manager()
    with handle_errors():
        result = manager.pull_all(source)

    for name in result.pulled:
        console.print(f"[green]✓[/green] {escape(name)} is up to date")
    for name, error in result.failed:
        console.print(f"[red]✗[/red] {escape(name)}: {escape(error)}")

    if result.failed:
        raise typer.Exit(1)


@app.command("sync")
def sync_sources(
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="Only sync this source."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would change without writing."),
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print machine-readable JSON.")] = False,
) -> None:
    """Copy skills from cloned sources into the catalog."""
    manager = _manager()
    with handle_errors():
        result = manager.sync_all(filter_name=source, dry_run=dry_run)

    if as_json:
        logger.output_json(result.to_dict())
    else:
        prefix = "Would sync" if dry_run else "Synced"
        console.print(f"[bold]{prefix} {result.total} skill(s)[/bold]")
        print_summary("Added", result.added, "green")
        print_summary("Updated", result.updated, "blue")
        print_summary("Skipped sources", result.skipped, "yellow")
        for name, error in result.failed:
            console.print(f"[red]✗[/red] {escape(name)}: {escape(error)}")

    if not result.ok:
        raise typer.Exit(1)
