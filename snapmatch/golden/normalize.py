"""
Normalizer for snapshot comparisons.

Brings an actual artifact as close to the expected one as its pattern
allows, so that a plain equality check decides the comparison and the
remaining difference is exactly what a diff should show.

Text filters (line endings, path separators) live in `filters.py` and are
re-exported here.
"""

import logging

from snapmatch.domain.constants import FORMAT_BINARY, FORMAT_JSON, FORMAT_JSONL, FORMAT_TEXT

from .data import Data
from .filters import filter_value, normalize_lines, normalize_paths, normalize_text
from .pattern import normalize_to_pattern, normalize_to_pattern_unordered
from .redactions import Redactions
from .structured import normalize_value, normalize_value_unordered

logger = logging.getLogger(__name__)

__all__ = [
    "NormalizeToExpected",
    "filter_value",
    "normalize_lines",
    "normalize_paths",
    "normalize_text",
]


class NormalizeToExpected:
    """
    Normalize actual data towards an expected pattern.

    Wildcards and elision always apply; placeholders only once redaction
    is enabled with `redact()` or `redact_with()`.

    Usage:
        normalized = (
            NormalizeToExpected()
            .redact_with(redactions)
            .unordered()
            .normalize(actual, expected)
        )
        assert normalized == expected
    """

    def __init__(
        self,
        redactions: Redactions | None = None,
        unordered: bool = False,
    ):
        """
        Args:
            redactions: Registry to redact with (None = no placeholders)
            unordered: Compare lines and array elements as multisets
        """
        self._redactions = redactions
        self._unordered = unordered

    @property
    def redactions(self) -> Redactions:
        if self._redactions is None:
            return Redactions()
        return self._redactions

    @property
    def is_unordered(self) -> bool:
        return self._unordered

    def redact(self) -> "NormalizeToExpected":
        """Enable redaction with the default registry (`[EXE]` only)."""
        if self._redactions is None:
            self._redactions = Redactions.with_exe()
        return self

    def redact_with(self, redactions: Redactions) -> "NormalizeToExpected":
        """Enable redaction with `redactions`."""
        self._redactions = redactions
        return self

    def unordered(self) -> "NormalizeToExpected":
        self._unordered = True
        return self

    def normalize(self, actual: Data, expected: Data) -> Data:
        """
        Normalize `actual` towards `expected`.

        `actual` is first coerced to the expected format where possible
        (text parsed as JSON, JSON rendered as text). Pairings that cannot
        be aligned, binary included, return `actual` unchanged.

        Returns:
            Normalized data; equal to `expected` if and only if `actual`
            satisfies it
        """
        if FORMAT_BINARY in (actual.format, expected.format):
            return actual

        candidate = actual.coerce_to(expected.format)
        if candidate.format != expected.format:
            logger.debug(
                f"Cannot align {actual.format} with {expected.format}; "
                f"keeping actual as is"
            )
            return actual

        redactions = self.redactions
        if expected.format == FORMAT_TEXT:
            align = normalize_to_pattern_unordered if self._unordered else normalize_to_pattern
            return Data.text(align(candidate.value, expected.value, redactions), source=actual.source)

        align_value = normalize_value_unordered if self._unordered else normalize_value
        value = align_value(candidate.value, expected.value, redactions)
        if expected.format == FORMAT_JSONL:
            return Data.jsonl(value, source=actual.source)
        if expected.format == FORMAT_JSON:
            return Data.json(value, source=actual.source)
        return actual
