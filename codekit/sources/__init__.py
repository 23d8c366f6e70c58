"""External git sources that publish skills into the catalog."""

from codekit.sources.config import SourceConfig, SourcesConfig
from codekit.sources.manager import (
    PullResult,
    ScannedSkill,
    SourceManager,
    SourceStatus,
    SyncResult,
    derive_source_name,
)

__all__ = [
    "SourceConfig",
    "SourcesConfig",
    "PullResult",
    "ScannedSkill",
    "SourceManager",
    "SourceStatus",
    "SyncResult",
    "derive_source_name",
]
