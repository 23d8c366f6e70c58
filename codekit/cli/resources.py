"""list / add / remove subcommands, one group per resource kind."""

from typing import Annotated, List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from codekit import logger
from codekit.cli.common import handle_errors, print_error
from codekit.core.registry import get_resolver
from codekit.core.resolver import ResourceResolver
from codekit.core.resource import Resource, ResourceKind, ResourceListResult
from codekit.exceptions import CodekitError
from codekit.logger import console

HELP = {
    ResourceKind.AGENT: "Manage agent personas.",
    ResourceKind.SKILL: "Manage skills.",
    ResourceKind.COMMAND: "Manage slash commands.",
}


def _render_table(title: str, resources: list[Resource]) -> None:
    if not resources:
        console.print(f"[bold]{title}[/bold] [dim](none)[/dim]")
        return

    table = Table(title=title, title_justify="left", title_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Description")
    for resource in resources:
        table.add_row(
            escape(resource.name),
            escape(resource.category or ""),
            escape(resource.description),
        )
    console.print(table)


def _render_list(kind: ResourceKind, result: ResourceListResult, global_only: bool) -> None:
    _render_table(f"Available {kind.value}", result.bundled)
    if not global_only:
        _render_table("Project (./.claude)", result.project)
    _render_table("Global (~/.claude)", result.global_)


def _add_one(resolver: ResourceResolver, name: str, **options) -> bool:
    """Install one resource and report it. Returns False if it or a dependency failed."""
    try:
        result = resolver.add(name, **options)
    except CodekitError as e:
        print_error(str(e))
        return False

    singular = resolver.kind.singular
    if result.dry_run:
        console.print(
            f"[yellow]Would install[/yellow] {singular} [cyan]{escape(name)}[/cyan] "
            f"to {escape(str(result.path))}"
        )
    else:
        console.print(
            f"[green]Installed[/green] {singular} [cyan]{escape(name)}[/cyan] "
            f"to {escape(str(result.path))}"
        )
    for dep in result.dependencies_installed:
        verb = "Would install" if result.dry_run else "Installed"
        console.print(f"  [dim]{verb} dependency {escape(dep)}[/dim]")
    for dep, error in result.dependencies_failed:
        console.print(f"  [red]Failed dependency[/red] {escape(dep)}: {escape(error)}")
    for path in result.mirrored:
        verb = "Would mirror" if result.dry_run else "Mirrored"
        console.print(f"  [dim]{verb} to {escape(str(path))}[/dim]")
    return not result.dependencies_failed


def build_resource_app(kind: ResourceKind) -> typer.Typer:
    """Build the list/add/remove command group for a resource kind."""
    app = typer.Typer(help=HELP[kind], no_args_is_help=True)
    singular = kind.singular

    @app.command("list")
    def list_resources(
        global_only: Annotated[
            bool,
            typer.Option("--global", "-g", help="Skip the project scope."),
        ] = False,
        category: Annotated[
            Optional[str],
            typer.Option("--category", "-c", help="Only show this category."),
        ] = None,
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Print machine-readable JSON."),
        ] = False,
    ) -> None:
        """List bundled and installed resources."""
        with handle_errors():
            result = get_resolver(kind).list(global_only=global_only, category=category)

        if as_json:
            logger.output_json(result.to_dict())
            return
        _render_list(kind, result, global_only)

    @app.command("add")
    def add_resources(
        names: Annotated[
            List[str],
            typer.Argument(help=f"Name(s) of the {singular} to install."),
        ],
        global_install: Annotated[
            bool,
            typer.Option("--global", "-g", help="Install to ~/.claude/ instead of ./.claude/."),
        ] = False,
        force: Annotated[
            bool,
            typer.Option("--force", "-f", help="Overwrite an existing installation."),
        ] = False,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="Show what would be installed without writing."),
        ] = False,
        skip_deps: Annotated[
            bool,
            typer.Option("--skip-deps", help="Do not install declared dependencies."),
        ] = False,
    ) -> None:
        """Install resources from the catalog.

        Examples:
          codekit agents add typescript-expert
          codekit skills add code-review --global
        """
        with handle_errors():
            resolver = get_resolver(kind)

        failed = 0
        for name in names:
            ok = _add_one(
                resolver,
                name,
                global_install=global_install,
                force=force,
                dry_run=dry_run,
                skip_deps=skip_deps,
            )
            if not ok:
                failed += 1

        if failed:
            console.print(f"[red]{failed} of {len(names)} {kind.value} had failures[/red]")
            raise typer.Exit(1)

    @app.command("remove")
    def remove_resource(
        name: Annotated[
            str,
            typer.Argument(help=f"Name of the {singular} to remove."),
        ],
        global_install: Annotated[
            bool,
            typer.Option("--global", "-g", help="Only look in ~/.claude/."),
        ] = False,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="Show what would be removed without deleting."),
        ] = False,
    ) -> None:
        """Remove an installed resource."""
        with handle_errors():
            result = get_resolver(kind).remove(name, global_install=global_install, dry_run=dry_run)

        if result.dry_run:
            console.print(
                f"[yellow]Would remove[/yellow] {singular} [cyan]{escape(name)}[/cyan] "
                f"from {escape(str(result.path))}"
            )
        else:
            console.print(
                f"[green]Removed[/green] {singular} [cyan]{escape(name)}[/cyan] "
                f"from {escape(str(result.path))}"
            )

    return app
