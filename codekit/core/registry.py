"""Registry of resolver singletons.

One resolver per resource kind is built lazily from the active settings and
shared for the rest of the invocation. The catalog backend is chosen once,
when the first resolver is built.

Thread-safe: All registry operations are protected by a lock.
"""

import threading

from codekit.catalog import TemplateCatalog, create_catalog
from codekit.core.agents import AgentResolver
from codekit.core.commands import CommandResolver
from codekit.core.resolver import ResourceResolver
from codekit.core.resource import ResourceKind
from codekit.core.skills import SkillResolver
from codekit.core.specs import CLAUDE_SPEC, MIRROR_SPECS
from codekit.core.store import ResourceStore
from codekit.settings import Settings

RESOLVER_CLASSES: dict[ResourceKind, type[ResourceResolver]] = {
    ResourceKind.AGENT: AgentResolver,
    ResourceKind.SKILL: SkillResolver,
    ResourceKind.COMMAND: CommandResolver,
}

# Module-level state with lock for thread safety
_registry_lock = threading.Lock()
_settings: Settings | None = None
_catalog: TemplateCatalog | None = None
_resolvers: dict[ResourceKind, ResourceResolver] = {}


def configure(settings: Settings) -> None:
    """Use these settings for every resolver built from now on.

    Resolvers and the catalog built under earlier settings are dropped.
    """
    global _settings, _catalog
    with _registry_lock:
        _settings = settings
        _catalog = None
        _resolvers.clear()


def _current_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def _current_catalog() -> TemplateCatalog:
    global _catalog
    if _catalog is None:
        _catalog = create_catalog(_current_settings())
    return _catalog


def get_settings() -> Settings:
    """Get the active settings, reading the environment on first use."""
    with _registry_lock:
        return _current_settings()


def get_catalog() -> TemplateCatalog:
    """Get the shared template catalog."""
    with _registry_lock:
        return _current_catalog()


def get_resolver(kind: ResourceKind) -> ResourceResolver:
    """Get the resolver for a resource kind.

    Args:
        kind: The resource kind

    Returns:
        The shared resolver instance for that kind
    """
    with _registry_lock:
        resolver = _resolvers.get(kind)
        if resolver is None:
            settings = _current_settings()
            store = ResourceStore(CLAUDE_SPEC, settings.project_root, settings.home)
            mirrors = [ResourceStore(spec, settings.project_root, settings.home) for spec in MIRROR_SPECS]
            resolver = RESOLVER_CLASSES[kind](_current_catalog(), store, mirrors)
            _resolvers[kind] = resolver
        return resolver


# --- Test utilities for registry isolation ---


def clear_registry() -> None:
    """Drop settings, catalog and resolvers.

    This is primarily for testing purposes to ensure test isolation.
    """
    global _settings, _catalog
    with _registry_lock:
        _settings = None
        _catalog = None
        _resolvers.clear()


def get_registry_snapshot() -> tuple[Settings | None, TemplateCatalog | None, dict[ResourceKind, ResourceResolver]]:
    """Get a snapshot of the current registry state.

    Returns:
        Tuple of (settings, catalog, resolvers copy)
    """
    with _registry_lock:
        return _settings, _catalog, _resolvers.copy()


def restore_registry_snapshot(
    snapshot: tuple[Settings | None, TemplateCatalog | None, dict[ResourceKind, ResourceResolver]],
) -> None:
    """Restore registry state from a snapshot.

    Args:
        snapshot: Tuple returned by get_registry_snapshot()
    """
    global _settings, _catalog
    settings, catalog, resolvers = snapshot
    with _registry_lock:
        _settings = settings
        _catalog = catalog
        _resolvers.clear()
        _resolvers.update(resolvers)
