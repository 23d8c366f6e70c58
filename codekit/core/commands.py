"""Slash command resolver.

Commands are named by their path under the commands root, so
``git/commit.md`` installs as the ``/git/commit`` slash command.
"""

from typing import Sequence

from codekit.catalog import TemplateCatalog
from codekit.core.resolver import ResourceResolver
from codekit.core.resource import Resource
from codekit.core.specs import COMMAND_SPEC
from codekit.core.store import ResourceStore

ROOT_GROUP = "root"


class CommandResolver(ResourceResolver):
    """Resolver for single-file slash commands."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        store: ResourceStore,
        mirrors: Sequence[ResourceStore] = (),
    ) -> None:
        super().__init__(COMMAND_SPEC, catalog, store, mirrors)

    def get_by_group(self) -> dict[str, list[Resource]]:
        """Group every listed command by its first namespace segment."""
        result = self.list()
        by_group: dict[str, list[Resource]] = {}
        for command in result.bundled + result.project + result.global_:
            parts = command.name.split("/")
            group = parts[0] if len(parts) > 1 else ROOT_GROUP
            by_group.setdefault(group, []).append(command)
        return by_group

    @staticmethod
    def slash_command(command: Resource) -> str:
        """Slash command usage, e.g. ``/git/commit [message]``."""
        hint = command.frontmatter.get("argument-hint")
        return f"/{command.name} {hint}" if hint else f"/{command.name}"
