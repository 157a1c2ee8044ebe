"""snapmatch: snapshot testing with redactions, wildcards and elision."""

from snapmatch.core.config import SnapshotConfig, load_config
from snapmatch.domain.errors import (
    CIEnvironmentError,
    ConfigError,
    ErrorCodes,
    InvalidPlaceholderError,
    SnapshotError,
    SnapshotReadError,
)
from snapmatch.golden import (
    Data,
    NormalizeToExpected,
    RedactedValue,
    Redactions,
    SnapshotAssert,
    line_matches,
    normalize_to_pattern,
    normalize_to_pattern_unordered,
    normalize_value,
    normalize_value_unordered,
)

__version__ = "0.1.0"

__all__ = [
    "Data",
    "NormalizeToExpected",
    "RedactedValue",
    "Redactions",
    "SnapshotAssert",
    "SnapshotConfig",
    "load_config",
    "line_matches",
    "normalize_to_pattern",
    "normalize_to_pattern_unordered",
    "normalize_value",
    "normalize_value_unordered",
    "SnapshotError",
    "InvalidPlaceholderError",
    "ConfigError",
    "SnapshotReadError",
    "CIEnvironmentError",
    "ErrorCodes",
]
