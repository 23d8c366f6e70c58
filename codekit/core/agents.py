"""Agent persona resolver."""

import re
from typing import Sequence

from codekit.catalog import TemplateCatalog
from codekit.core.resolver import ResourceResolver
from codekit.core.resource import Resource
from codekit.core.specs import AGENT_SPEC
from codekit.core.store import ResourceStore

DEFAULT_CATEGORY = "general"

# Routing phrases agents use to hand work to another expert
ROUTING_PATTERNS = [
    re.compile(r"use (\w+-expert)"),
    re.compile(r"delegate to (\w+-expert)"),
    re.compile(r"switch to (\w+-expert)"),
    re.compile(r"recommend (\w+-expert)"),
]


class AgentResolver(ResourceResolver):
    """Resolver for single-file agent personas."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        store: ResourceStore,
        mirrors: Sequence[ResourceStore] = (),
    ) -> None:
        super().__init__(AGENT_SPEC, catalog, store, mirrors)

    def get_by_category(self) -> dict[str, list[Resource]]:
        """Group every listed agent (all scopes) by category."""
        result = self.list()
        by_category: dict[str, list[Resource]] = {}
        for agent in result.bundled + result.project + result.global_:
            by_category.setdefault(agent.category or DEFAULT_CATEGORY, []).append(agent)
        return by_category

    @staticmethod
    def extract_dependencies(agent: Resource) -> list[str]:
        """Find other experts an agent routes to in its body.

        Returns:
            Unique agent names in order of first mention, excluding the agent itself
        """
        content = agent.content.lower()
        deps: list[str] = []
        for pattern in ROUTING_PATTERNS:
            for match in pattern.finditer(content):
                dep = match.group(1)
                if dep != agent.name and dep not in deps:
                    deps.append(dep)
        return deps
