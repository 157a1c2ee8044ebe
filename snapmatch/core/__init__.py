"""Core layer: configuration and snapshot file writes."""

from .config import SnapshotConfig, load_config, resolve_action
from .fs import atomic_write_bytes, atomic_write_text

__all__ = [
    "SnapshotConfig",
    "load_config",
    "resolve_action",
    "atomic_write_bytes",
    "atomic_write_text",
]
