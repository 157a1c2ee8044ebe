"""
Snapshot comparison utilities.

Provides human-readable diff output for snapshot failures:
- text: unified diff of expected vs normalized actual
- trees: path-labelled list of differences
"""

import difflib
import json
from dataclasses import dataclass
from typing import Any

from snapmatch.domain.constants import FORMAT_JSONL

from .data import Data


@dataclass
class DiffResult:
    """One difference between two trees."""
    match: bool
    path: str = ""
    expected: Any = None
    actual: Any = None
    message: str = ""

    def __str__(self) -> str:
        if self.match:
            return "OK"
        return f"DIFF at '{self.path or '$'}': {self.message}\n  Expected: {self.expected!r}\n  Actual:   {self.actual!r}"


def render_text_diff(
    expected: str,
    actual: str,
    expected_label: str = "expected",
    actual_label: str = "actual",
) -> str:
    """
    Unified diff of two texts.

    Returns:
        Diff text, empty when both sides are equal
    """
    lines = difflib.unified_diff(
        expected.splitlines(keepends=True),
        actual.splitlines(keepends=True),
        fromfile=expected_label,
        tofile=actual_label,
    )
    rendered = []
    for line in lines:
        rendered.append(line if line.endswith("\n") else line + "\n\\ No newline at end of file\n")
    return "".join(rendered)


def _child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def compare_structures(expected: Any, actual: Any, path: str = "") -> list[DiffResult]:
    """
    Compare an expected tree with a normalized actual tree.

    Types are compared strictly: `1` and `1.0` or `True` and `1` differ.
    Lists of different lengths report the length and still compare the
    common prefix.

    Returns:
        List of DiffResult (empty if match)
    """
    if type(expected) is not type(actual):
        return [DiffResult(
            match=False,
            path=path,
            expected=expected,
            actual=actual,
            message=f"Type mismatch ({type(expected).__name__} vs {type(actual).__name__})",
        )]

    diffs: list[DiffResult] = []
    if isinstance(expected, dict):
        for key in sorted(set(expected) | set(actual)):
            key_path = _child_path(path, key)
            if key not in expected:
                diffs.append(DiffResult(False, key_path, None, actual[key], "Unexpected key in actual"))
            elif key not in actual:
                diffs.append(DiffResult(False, key_path, expected[key], None, "Missing key in actual"))
            else:
                diffs.extend(compare_structures(expected[key], actual[key], key_path))
    elif isinstance(expected, list):
        if len(expected) != len(actual):
            diffs.append(DiffResult(False, path, len(expected), len(actual), "List length mismatch"))
        for index, (left, right) in enumerate(zip(expected, actual)):
            diffs.extend(compare_structures(left, right, f"{path}[{index}]"))
    elif expected != actual:
        diffs.append(DiffResult(False, path, expected, actual, "Value mismatch"))
    return diffs


def format_diff_report(diffs: list[DiffResult], limit: int = 10) -> str:
    """Numbered path report, at most `limit` entries."""
    if not diffs:
        return "No differences found."

    entries = [f"{number}. {diff}" for number, diff in enumerate(diffs[:limit], start=1)]
    hidden = len(diffs) - len(entries)
    if hidden:
        entries.append(f"... {hidden} more difference(s) not shown")
    return f"{len(diffs)} path difference(s):\n" + "\n".join(entries)


def _render_for_diff(data: Data) -> str:
    if data.is_structured:
        if data.format == FORMAT_JSONL:
            return "".join(json.dumps(r, ensure_ascii=False, sort_keys=True) + "\n" for r in data.value)
        return json.dumps(data.value, indent=2, ensure_ascii=False, sort_keys=True) + "\n"
    return data.render()


def render_diff(expected: Data, actual: Data) -> str:
    """
    Render the difference between expected and normalized actual.

    Trees get a path report followed by a text diff of their sorted-key
    rendering; text gets a unified diff.
    """
    sections = []
    if expected.is_structured and actual.is_structured:
        sections.append(format_diff_report(compare_structures(expected.value, actual.value)))

    expected_label = str(expected.source) if expected.source else "expected"
    actual_label = str(actual.source) if actual.source else "actual"
    text_diff = render_text_diff(
        _render_for_diff(expected),
        _render_for_diff(actual),
        expected_label,
        actual_label,
    )
    if text_diff:
        sections.append(text_diff)
    elif expected.format != actual.format:
        sections.append(f"Format mismatch: expected {expected.format}, actual {actual.format}")
    else:
        sections.append(f"{expected.format} contents differ")
    return "\n".join(sections)


def assert_snapshot_match(expected: Data, actual: Data) -> None:
    """
    Assert that normalized actual equals expected, with a diff on failure.

    Args:
        expected: Expected snapshot
        actual: Actual data, already normalized towards `expected`

    Raises:
        AssertionError: With the rendered diff if they differ
    """
    if actual == expected:
        return
    raise AssertionError(f"Snapshot comparison failed:\n{render_diff(expected, actual)}")
