"""
Snapshot assertions for tests.

Compares actual output against an inline or on-disk snapshot and, when
asked to, records the normalized actual output as the new snapshot.

Safety Features:
- Snapshots are only overwritten on mismatch or when missing
- Writes are atomic (no half-written snapshot)
- Overwrite is refused in CI so baselines are never updated by accident
"""

import logging
import os
from pathlib import Path
from typing import Any

from snapmatch.core.config import SnapshotConfig, resolve_action
from snapmatch.domain.constants import (
    ACTION_IGNORE,
    ACTION_OVERWRITE,
    ACTION_SKIP,
    FORMAT_BINARY,
    FORMAT_JSON,
    FORMAT_JSONL,
    FORMAT_TEXT,
)
from snapmatch.domain.errors import CIEnvironmentError, ErrorCodes, SnapshotReadError

from .compare import assert_snapshot_match, render_diff
from .data import Data
from .filters import filter_value, normalize_lines, normalize_paths
from .normalize import NormalizeToExpected
from .redactions import Redactions

logger = logging.getLogger(__name__)

CI_INDICATORS = [
    "CI",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "JENKINS_URL",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
    "TF_BUILD",  # Azure Pipelines
    "CODEBUILD_BUILD_ID",  # AWS CodeBuild
]


def check_ci_environment() -> None:
    """
    Refuse snapshot overwrites inside a CI environment.

    Raises:
        CIEnvironmentError: If a CI indicator variable is set
    """
    for indicator in CI_INDICATORS:
        value = os.getenv(indicator)
        if value:
            raise CIEnvironmentError(
                f"Refusing to overwrite snapshots in CI.\n"
                f"Detected CI indicator: {indicator}={value}\n\n"
                f"Snapshots must be updated locally and reviewed before committing."
            )


def _as_data(value: Any) -> Data:
    if isinstance(value, Data):
        return value
    if isinstance(value, str):
        return Data.text(value)
    if isinstance(value, (bytes, bytearray)):
        return Data.binary(bytes(value))
    return Data.json(value)


class SnapshotAssert:
    """
    Assert that actual output satisfies a snapshot pattern.

    Usage:
        snapshots = SnapshotAssert(redactions=redactions)
        snapshots.eq(output, "Hello [..]\\n...\\n")
        snapshots.eq_path(output, Path("tests/snapshots/hello.txt"))
    """

    def __init__(
        self,
        redactions: Redactions | None = None,
        action: str | None = None,
        unordered: bool = False,
        normalize_paths: bool = True,
        normalize_newlines: bool = True,
    ):
        """
        Args:
            redactions: Registry of placeholders (None = `[EXE]` only)
            action: verify / overwrite / skip / ignore (None = `SNAPSHOTS` env var or verify)
            unordered: Compare lines and array elements as multisets
            normalize_paths: Rewrite `\\` to `/` on both sides
            normalize_newlines: Rewrite CRLF / CR to LF on both sides
        """
        self.redactions = redactions if redactions is not None else Redactions.with_exe()
        self.action = resolve_action(action)
        self.unordered = unordered
        self.normalize_paths = normalize_paths
        self.normalize_newlines = normalize_newlines

    @classmethod
    def from_config(cls, config: SnapshotConfig) -> "SnapshotAssert":
        return cls(
            redactions=config.build_redactions(),
            action=config.action,
            unordered=config.unordered,
            normalize_paths=config.normalize_paths,
            normalize_newlines=config.normalize_newlines,
        )

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    def _filter(self, data: Data) -> Data:
        if data.format == FORMAT_BINARY:
            return data

        def op(text: str) -> str:
            if self.normalize_newlines:
                text = normalize_lines(text)
            if self.normalize_paths:
                text = normalize_paths(text)
            return text

        if data.format == FORMAT_TEXT:
            return Data.text(op(data.value), source=data.source)
        return Data(data.format, filter_value(data.value, op), source=data.source)

    def normalize(self, actual: Any, expected: Any) -> tuple[Data, Data]:
        """
        Filter both sides and normalize actual towards expected.

        Returns:
            (normalized actual, filtered expected); never raises on mismatch
        """
        actual_data = self._filter(_as_data(actual))
        expected_data = self._filter(_as_data(expected))
        normalizer = NormalizeToExpected(redactions=self.redactions, unordered=self.unordered)
        return normalizer.normalize(actual_data, expected_data), expected_data

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def eq(self, actual: Any, expected: Any) -> None:
        """
        Assert `actual` satisfies an inline `expected` pattern.

        Raises:
            AssertionError: With a diff on mismatch (unless ignored)
        """
        if self.action == ACTION_SKIP:
            logger.debug("Snapshot comparison skipped")
            return
        normalized, expected_data = self.normalize(actual, expected)
        if self.action == ACTION_IGNORE:
            if normalized != expected_data:
                self._warn_mismatch(expected_data, normalized)
            return
        assert_snapshot_match(expected_data, normalized)

    def eq_path(self, actual: Any, expected_path: Path) -> None:
        """
        Assert `actual` satisfies the snapshot stored at `expected_path`.

        With action `overwrite`, a mismatching snapshot is replaced by the
        normalized actual (placeholders and satisfied wildcards are kept),
        and a missing one by the redacted actual. With action `ignore`, a
        mismatch is logged as a warning instead of failing.

        Raises:
            AssertionError: With a diff on mismatch (verify)
            SnapshotReadError: If the snapshot is missing (verify) or unreadable
            CIEnvironmentError: If an overwrite is attempted in CI
        """
        expected_path = Path(expected_path)
        if self.action == ACTION_SKIP:
            logger.debug(f"Snapshot comparison skipped for {expected_path}")
            return

        actual_data = _as_data(actual)
        if not expected_path.exists():
            if self.action == ACTION_OVERWRITE:
                self._overwrite(self._redact(actual_data), expected_path)
                return
            if self.action == ACTION_IGNORE:
                logger.warning(f"Snapshot {expected_path} is missing (ignored)")
                return
            raise SnapshotReadError(ErrorCodes.SNAPSHOT_MISSING, path=str(expected_path))

        try:
            expected_data = Data.read_from(expected_path, format=self._snapshot_format(actual_data, expected_path))
        except SnapshotReadError as e:
            if self.action == ACTION_IGNORE:
                logger.warning(f"Snapshot {expected_path} is unreadable (ignored): {e}")
                return
            if self.action != ACTION_OVERWRITE:
                raise
            logger.warning(f"Replacing unreadable snapshot {expected_path}: {e}")
            self._overwrite(self._redact(actual_data), expected_path)
            return

        normalized, filtered_expected = self.normalize(actual_data, expected_data)
        if normalized == filtered_expected:
            return

        if self.action == ACTION_OVERWRITE:
            self._overwrite(normalized, expected_path)
            return
        if self.action == ACTION_IGNORE:
            self._warn_mismatch(filtered_expected, normalized)
            return
        assert_snapshot_match(filtered_expected, normalized)

    @staticmethod
    def _snapshot_format(actual: Data, path: Path) -> str | None:
        # A structured actual reads a suffix-less snapshot in its own format
        if actual.is_structured and path.suffix.lower() not in (".json", ".jsonl"):
            return actual.format
        return None

    def _redact(self, data: Data) -> Data:
        """Filtered actual with every live value replaced by its placeholder."""
        filtered = self._filter(data)
        if filtered.format == FORMAT_TEXT:
            return Data.text(self.redactions.redact(filtered.value), source=filtered.source)
        if filtered.is_structured:
            return Data(filtered.format, filter_value(filtered.value, self.redactions.redact), source=filtered.source)
        return filtered

    @staticmethod
    def _warn_mismatch(expected: Data, normalized: Data) -> None:
        logger.warning(f"Snapshot mismatch ignored:\n{render_diff(expected, normalized)}")

    def _overwrite(self, actual: Data, path: Path) -> None:
        check_ci_environment()
        target_format = {".json": FORMAT_JSON, ".jsonl": FORMAT_JSONL}.get(path.suffix.lower())
        data = actual.coerce_to(target_format) if target_format else actual
        data.write_to(path)
        logger.info(f"Overwrote snapshot {path}")

