"""
Domain constants: pattern grammar tokens and conventions shared by the
matchers, the harness and the CLI.
"""

import sys

# =============================================================================
# Pattern Grammar
# =============================================================================
# - `[..]` inside a line: any run of characters, never crossing a newline
# - `...` on a line of its own: zero or more whole lines
# - `"{...}"` as a tree value: any value / zero or more array elements
# - `"..."` as an object key bound to `"{...}"`: any remaining keys

LINE_WILDCARD = "[..]"
LINE_ELIDE = "..."
VALUE_WILDCARD = "{...}"
KEY_WILDCARD = "..."

# Named capture group of a pattern-derived redaction that marks the span to
# replace; without it the whole match is replaced.
REDACTED_GROUP = "redacted"

# =============================================================================
# Reserved Placeholders
# =============================================================================
# Not enforced by the engine; callers pre-register these by convention.

EXE_PLACEHOLDER = "[EXE]"
ROOT_PLACEHOLDER = "[ROOT]"
CWD_PLACEHOLDER = "[CWD]"

EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""

# =============================================================================
# Snapshot Actions
# =============================================================================

ACTION_VERIFY = "verify"
ACTION_OVERWRITE = "overwrite"
ACTION_SKIP = "skip"
ACTION_IGNORE = "ignore"
ACTIONS = (ACTION_VERIFY, ACTION_OVERWRITE, ACTION_SKIP, ACTION_IGNORE)

# Environment variable selecting the action for a whole test run.
SNAPSHOTS_ENV = "SNAPSHOTS"

# Default configuration file looked up in the working directory.
DEFAULT_CONFIG_FILENAME = "snapmatch.yaml"

# =============================================================================
# Data Formats
# =============================================================================

FORMAT_TEXT = "text"
FORMAT_JSON = "json"
FORMAT_JSONL = "jsonl"
FORMAT_BINARY = "binary"
