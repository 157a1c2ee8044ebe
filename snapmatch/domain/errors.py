"""
Error definitions for snapshot comparison.

Rules:
- A pattern/actual mismatch is NOT an error; it is reported by the
  normalized output differing from the expected snapshot.
- Configuration bugs (bad placeholder, bad config file) fail loudly.
"""

from typing import Any


class SnapshotError(Exception):
    """
    Base error raised by snapmatch outside of ordinary mismatches.

    Carries a stable error code plus free-form context:
    - invalid placeholder shape
    - malformed configuration
    - unreadable snapshot file

    Usage:
        raise SnapshotError("CONFIG_INVALID", path=str(path), key="action")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs/JSON."""
        return {
            "code": self.code,
            **self.context,
        }


class InvalidPlaceholderError(SnapshotError, ValueError):
    """Placeholder registered without the `[UPPER_CASE]` shape."""


class ConfigError(SnapshotError):
    """Configuration file could not be loaded or holds invalid values."""


class SnapshotReadError(SnapshotError):
    """Expected snapshot could not be read or parsed."""


class CIEnvironmentError(RuntimeError):
    """Raised when a snapshot overwrite is attempted in a CI environment."""
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Redactions ===
    PLACEHOLDER_NOT_BRACKETED = "PLACEHOLDER_NOT_BRACKETED"
    PLACEHOLDER_INVALID_CHARS = "PLACEHOLDER_INVALID_CHARS"
    REDACTION_VALUE_UNSUPPORTED = "REDACTION_VALUE_UNSUPPORTED"

    # === Config ===
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_UNREADABLE = "CONFIG_UNREADABLE"

    # === Snapshot files ===
    SNAPSHOT_UNREADABLE = "SNAPSHOT_UNREADABLE"
    SNAPSHOT_MISSING = "SNAPSHOT_MISSING"
    DATA_FORMAT_UNKNOWN = "DATA_FORMAT_UNKNOWN"
