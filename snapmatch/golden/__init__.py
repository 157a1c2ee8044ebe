"""
Snapshot matching against patterns.

Decides whether actual output satisfies a recorded snapshot and, when it
does not, produces a normalized view of actual that diffs precisely
against the snapshot.

Pattern grammar:
- `[..]`: any run of characters within one line
- `...` on its own line: zero or more lines
- `"{...}"`: any JSON value, or zero or more array elements
- `"...": "{...}"`: any object keys not listed
- `[NAME]`: a placeholder registered in `Redactions`

Safety Features:
- Aligners never raise on mismatch and never drop actual content
- Snapshot overwrites are atomic and refused in CI
"""

from .assertion import SnapshotAssert, check_ci_environment
from .compare import (
    DiffResult,
    assert_snapshot_match,
    compare_structures,
    format_diff_report,
    render_diff,
    render_text_diff,
)
from .data import Data
from .filters import filter_value, normalize_lines, normalize_paths, normalize_text
from .normalize import NormalizeToExpected
from .pattern import (
    align_ordered,
    align_unordered,
    is_line_elide,
    line_matches,
    normalize_to_pattern,
    normalize_to_pattern_unordered,
    split_lines,
)
from .redactions import RedactedValue, Redactions, validate_placeholder
from .structured import normalize_value, normalize_value_unordered, values_equal

__all__ = [
    # Redactions
    "Redactions",
    "RedactedValue",
    "validate_placeholder",
    # Matching
    "line_matches",
    "is_line_elide",
    "split_lines",
    "normalize_to_pattern",
    "normalize_to_pattern_unordered",
    "align_ordered",
    "align_unordered",
    "normalize_value",
    "normalize_value_unordered",
    "values_equal",
    # Normalization
    "NormalizeToExpected",
    "filter_value",
    "normalize_lines",
    "normalize_paths",
    "normalize_text",
    # Data
    "Data",
    # Comparison
    "DiffResult",
    "assert_snapshot_match",
    "compare_structures",
    "format_diff_report",
    "render_diff",
    "render_text_diff",
    # Assertions
    "SnapshotAssert",
    "check_ci_environment",
]
