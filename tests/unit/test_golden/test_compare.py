"""
test_compare.py - diff rendering tests
"""

from pathlib import Path

import pytest

from snapmatch.golden.compare import (
    DiffResult,
    assert_snapshot_match,
    compare_structures,
    format_diff_report,
    render_diff,
    render_text_diff,
)
from snapmatch.golden.data import Data

# =============================================================================
# compare_structures
# =============================================================================


class TestCompareStructures:
    """Path-labelled tree differences."""

    def test_equal(self):
        """Equal trees have no differences."""
        assert compare_structures({"a": [1, {"b": "x"}]}, {"a": [1, {"b": "x"}]}) == []

    def test_value_mismatch(self):
        """Differing leaves report their path."""
        diffs = compare_structures({"a": {"b": 1}}, {"a": {"b": 2}})

        assert len(diffs) == 1
        assert diffs[0].path == "a.b"
        assert diffs[0].message == "Value mismatch"

    def test_missing_and_unexpected_keys(self):
        """Keys on one side only are reported."""
        diffs = compare_structures({"a": 1, "b": 2}, {"a": 1, "c": 3})

        assert [(d.path, d.message) for d in diffs] == [
            ("b", "Missing key in actual"),
            ("c", "Unexpected key in actual"),
        ]

    def test_list_length(self):
        """Length mismatch is reported alongside element diffs."""
        diffs = compare_structures([1, 2], [1, 3, 4])

        assert [(d.path, d.message) for d in diffs] == [
            ("", "List length mismatch"),
            ("[1]", "Value mismatch"),
        ]

    def test_type_mismatch_is_strict(self):
        """`1` and `1.0` are different types."""
        diffs = compare_structures({"a": 1}, {"a": 1.0})

        assert len(diffs) == 1
        assert diffs[0].message == "Type mismatch (int vs float)"


# =============================================================================
# Reports
# =============================================================================


class TestReports:
    """format_diff_report / render_text_diff / render_diff."""

    def test_no_diffs(self):
        """Empty list gives a fixed message."""
        assert format_diff_report([]) == "No differences found."

    def test_truncates(self):
        """Only `limit` entries are shown."""
        diffs = [DiffResult(match=False, path=f"k{i}", message="Value mismatch") for i in range(5)]

        report = format_diff_report(diffs, limit=2)

        assert report.startswith("5 path difference(s):")
        assert "k1" in report
        assert "k2" not in report
        assert report.endswith("... 3 more difference(s) not shown")

    def test_diff_result_str(self):
        """A root path is shown as `$`."""
        assert str(DiffResult(match=True)) == "OK"
        assert "DIFF at '$'" in str(DiffResult(match=False, expected=1, actual=2))

    def test_text_diff(self):
        """Unified diff marks changed lines."""
        diff = render_text_diff("a\nb\n", "a\nc\n")

        assert "--- expected" in diff
        assert "+++ actual" in diff
        assert "-b\n" in diff
        assert "+c\n" in diff

    def test_text_diff_equal(self):
        """Equal texts give an empty diff."""
        assert render_text_diff("a\n", "a\n") == ""

    def test_text_diff_missing_newline(self):
        """A missing final newline is called out."""
        diff = render_text_diff("a\n", "a")

        assert "\\ No newline at end of file" in diff

    def test_render_diff_uses_source_labels(self):
        """Snapshot paths label the diff."""
        expected = Data.text("a\n", source=Path("snap.txt"))

        assert "--- snap.txt" in render_diff(expected, Data.text("b\n"))

    def test_render_diff_json(self):
        """JSON diffs include the path report."""
        rendered = render_diff(Data.json({"a": 1}), Data.json({"a": 2}))

        assert "DIFF at 'a'" in rendered
        assert '-  "a": 1' in rendered
        assert '+  "a": 2' in rendered

    def test_render_diff_binary(self):
        """Same-size binaries still report a difference."""
        assert "binary contents differ" in render_diff(Data.binary(b"a"), Data.binary(b"b"))


# =============================================================================
# assert_snapshot_match
# =============================================================================


class TestAssertSnapshotMatch:
    """Assertion boundary."""

    def test_match(self):
        """Equal data passes."""
        assert_snapshot_match(Data.text("a\n"), Data.text("a\n"))

    def test_mismatch(self):
        """Unequal data raises AssertionError with the diff."""
        with pytest.raises(AssertionError, match="Snapshot comparison failed") as exc_info:
            assert_snapshot_match(Data.text("a\n"), Data.text("b\n"))

        assert "+b" in str(exc_info.value)
