"""Domain layer: errors and constants."""

from .errors import (
    CIEnvironmentError,
    ConfigError,
    ErrorCodes,
    InvalidPlaceholderError,
    SnapshotError,
    SnapshotReadError,
)

__all__ = [
    "SnapshotError",
    "InvalidPlaceholderError",
    "ConfigError",
    "SnapshotReadError",
    "CIEnvironmentError",
    "ErrorCodes",
]
