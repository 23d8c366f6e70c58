"""CLI entry point for codekit."""

from typing import Annotated

import typer

from codekit import __version__, logger
from codekit.cli import sources
from codekit.cli.resources import build_resource_app
from codekit.core.resource import ResourceKind

app = typer.Typer(
    name="codekit",
    help="Install agents, skills and slash commands into Claude Code.",
    no_args_is_help=True,
    add_completion=False,
)

app.add_typer(build_resource_app(ResourceKind.AGENT), name="agents")
app.add_typer(build_resource_app(ResourceKind.SKILL), name="skills")
app.add_typer(build_resource_app(ResourceKind.COMMAND), name="commands")
app.add_typer(sources.app, name="sources")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"codekit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Install agents, skills and slash commands into Claude Code."""
    logger.set_verbose(verbose)


if __name__ == "__main__":
    app()
