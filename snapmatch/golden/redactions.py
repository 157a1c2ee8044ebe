"""
Redaction registry for snapshot comparisons.

Replaces live, non-deterministic values (paths, executable suffixes,
timestamps) with bracketed placeholders such as `[ROOT]` so that actual
output can be compared to a recorded snapshot.

Value kinds:
- Literal: an exact substring
- Path: native form and forward-slash form, whichever occurs first
- Pattern: a compiled regex; a `redacted` named group narrows the span

Conflict resolution is deterministic regardless of registration order:
literal/path entries outrank regex entries, longer text outranks shorter,
ties break on the text itself.
"""

import logging
import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from snapmatch.domain.constants import EXE_PLACEHOLDER, EXE_SUFFIX, REDACTED_GROUP
from snapmatch.domain.errors import ErrorCodes, InvalidPlaceholderError, SnapshotError

from .filters import normalize_lines, normalize_paths

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\[[A-Z_]+\]")

KIND_LITERAL = "literal"
KIND_PATH = "path"
KIND_REGEX = "regex"

_KIND_RANK = {
    KIND_LITERAL: 0,
    KIND_PATH: 0,
    KIND_REGEX: 1,
}


def validate_placeholder(placeholder: str) -> str:
    """
    Check that `placeholder` has the `[UPPER_CASE]` shape.

    Returns:
        The placeholder unchanged

    Raises:
        InvalidPlaceholderError: If it is not bracketed or holds anything
            other than A-Z and `_`
    """
    if (
        not isinstance(placeholder, str)
        or not placeholder.startswith("[")
        or not placeholder.endswith("]")
    ):
        raise InvalidPlaceholderError(
            ErrorCodes.PLACEHOLDER_NOT_BRACKETED,
            placeholder=placeholder,
        )
    if PLACEHOLDER_PATTERN.fullmatch(placeholder) is None:
        raise InvalidPlaceholderError(
            ErrorCodes.PLACEHOLDER_INVALID_CHARS,
            placeholder=placeholder,
        )
    return placeholder


@dataclass(frozen=True)
class RedactedValue:
    """A value matcher: the live text a placeholder stands in for."""
    kind: str
    text: str
    alternate: str | None = None
    flags: int = 0
    regex: re.Pattern | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # A regex matcher always carries its compiled pattern
        if self.kind == KIND_REGEX and self.regex is None:
            object.__setattr__(self, "regex", re.compile(self.text, self.flags))

    @classmethod
    def literal(cls, text: str) -> "RedactedValue":
        return cls(kind=KIND_LITERAL, text=normalize_lines(text))

    @classmethod
    def path(cls, path: "os.PathLike[str] | str") -> "RedactedValue":
        native = os.fspath(path)
        normalized = normalize_paths(native)
        return cls(
            kind=KIND_PATH,
            text=native,
            alternate=normalized if normalized != native else None,
        )

    @classmethod
    def pattern(cls, regex: re.Pattern) -> "RedactedValue":
        if not isinstance(regex.pattern, str):
            raise SnapshotError(
                ErrorCodes.REDACTION_VALUE_UNSUPPORTED,
                value_type="bytes pattern",
            )
        return cls(kind=KIND_REGEX, text=regex.pattern, flags=regex.flags, regex=regex)

    @classmethod
    def coerce(cls, value: Any) -> "RedactedValue | None":
        """
        Build a matcher from a user-supplied value.

        Returns:
            None for an empty string or path, meaning "unused placeholder"
        """
        if isinstance(value, RedactedValue):
            return value
        if isinstance(value, re.Pattern):
            return cls.pattern(value)
        if isinstance(value, str):
            return cls.literal(value) if value else None
        if isinstance(value, os.PathLike):
            return cls.path(value) if os.fspath(value) else None
        raise SnapshotError(
            ErrorCodes.REDACTION_VALUE_UNSUPPORTED,
            value_type=type(value).__name__,
        )

    @property
    def sort_key(self) -> tuple[int, int, str]:
        return (_KIND_RANK[self.kind], -len(self.text), self.text)

    def find_in(self, buffer: str, start: int = 0) -> tuple[int, int] | None:
        """
        Locate the leftmost occurrence at or after `start`.

        Returns:
            (begin, end) span to replace, or None
        """
        if self.regex is not None:
            match = self.regex.search(buffer, start)
            if match is None:
                return None
            if REDACTED_GROUP in self.regex.groupindex and match.group(REDACTED_GROUP) is not None:
                return match.span(REDACTED_GROUP)
            return match.span()

        spans = []
        for needle in (self.text, self.alternate):
            if needle:
                offset = buffer.find(needle, start)
                if offset != -1:
                    spans.append((offset, offset + len(needle)))
        if not spans:
            return None
        # Leftmost wins; the native form wins a tie.
        return min(spans, key=lambda span: span[0])


@dataclass
class _Entry:
    value: RedactedValue
    placeholders: list[str]

    @property
    def canonical(self) -> str:
        return self.placeholders[0]


class Redactions:
    """
    Placeholder -> value bindings.

    Built once per test configuration and read-only while comparing; clone
    with `copy()` for per-test additions instead of mutating a shared
    instance.

    Usage:
        redactions = Redactions()
        redactions.insert("[ROOT]", Path("/tmp/sandbox"))
        redactions.redact("wrote /tmp/sandbox/out.txt")  # 'wrote [ROOT]/out.txt'
    """

    def __init__(self) -> None:
        self._entries: list[_Entry] = []
        self._unused: set[str] = set()
        self._aliases: dict[str, str] = {}

    @classmethod
    def with_exe(cls) -> "Redactions":
        """Registry with `[EXE]` bound to the platform's executable suffix."""
        redactions = cls()
        redactions.insert(EXE_PLACEHOLDER, EXE_SUFFIX)
        return redactions

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert(self, placeholder: str, value: Any) -> None:
        """
        Bind `placeholder` to `value`.

        An empty value marks the placeholder as unused: it is erased from
        patterns before matching.

        Args:
            placeholder: `[UPPER_CASE]` token
            value: str, os.PathLike, re.Pattern or RedactedValue

        Raises:
            InvalidPlaceholderError: If the placeholder shape is wrong
        """
        placeholder = validate_placeholder(placeholder)
        redacted = RedactedValue.coerce(value)
        if redacted is None:
            self._unused.add(placeholder)
            logger.debug(f"Registered unused placeholder {placeholder}")
            return

        self._unused.discard(placeholder)
        for entry in self._entries:
            if entry.value == redacted:
                if placeholder not in entry.placeholders:
                    entry.placeholders.append(placeholder)
                    entry.placeholders.sort()
                break
        else:
            self._entries.append(_Entry(value=redacted, placeholders=[placeholder]))
            self._entries.sort(key=lambda e: e.value.sort_key)
        self._rebuild_aliases()

    def extend(self, vars: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        """Insert several bindings; stops at the first invalid placeholder."""
        items = vars.items() if isinstance(vars, Mapping) else vars
        for placeholder, value in items:
            self.insert(placeholder, value)

    def remove(self, placeholder: str) -> None:
        """Drop every binding naming `placeholder`."""
        placeholder = validate_placeholder(placeholder)
        self._unused.discard(placeholder)
        for entry in self._entries:
            if placeholder in entry.placeholders:
                entry.placeholders.remove(placeholder)
        self._entries = [e for e in self._entries if e.placeholders]
        self._rebuild_aliases()

    def _rebuild_aliases(self) -> None:
        # A placeholder is an alias when every value it names renders under
        # one other (canonical) placeholder.
        canonicals: dict[str, set[str]] = {}
        for entry in self._entries:
            for placeholder in entry.placeholders:
                canonicals.setdefault(placeholder, set()).add(entry.canonical)
        self._aliases = {
            placeholder: next(iter(targets))
            for placeholder, targets in canonicals.items()
            if len(targets) == 1 and placeholder not in targets
        }

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    def redact(self, text: str) -> str:
        """
        Replace every bound value in `text` with its placeholder.

        Entries apply in priority order; each replaces its non-overlapping
        leftmost occurrences, resuming after the inserted placeholder.
        """
        for entry in self._entries:
            text = _replace_all(text, entry.value, entry.canonical)
        return text

    def clear_unused(self, pattern: str) -> str:
        """Erase unused placeholders from `pattern`."""
        if not self._unused or "[" not in pattern:
            return pattern
        for placeholder in sorted(self._unused, key=lambda p: (-len(p), p)):
            pattern = pattern.replace(placeholder, "")
        return pattern

    def canonicalize(self, pattern: str) -> str:
        """Rewrite alias placeholders in `pattern` to the one `redact` emits."""
        if not self._aliases or "[" not in pattern:
            return pattern
        for alias in sorted(self._aliases, key=lambda p: (-len(p), p)):
            pattern = pattern.replace(alias, self._aliases[alias])
        return pattern

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def placeholders(self) -> list[str]:
        """All registered placeholders, bound and unused, sorted."""
        names = set(self._unused)
        for entry in self._entries:
            names.update(entry.placeholders)
        return sorted(names)

    def entries(self) -> list[tuple[RedactedValue, tuple[str, ...]]]:
        """Bound entries in priority order."""
        return [(e.value, tuple(e.placeholders)) for e in self._entries]

    def is_unused(self, placeholder: str) -> bool:
        return placeholder in self._unused

    def copy(self) -> "Redactions":
        clone = Redactions()
        clone._entries = [_Entry(e.value, list(e.placeholders)) for e in self._entries]
        clone._unused = set(self._unused)
        clone._aliases = dict(self._aliases)
        return clone

    def __len__(self) -> int:
        return len(self._entries) + len(self._unused)

    def __contains__(self, placeholder: object) -> bool:
        return placeholder in self.placeholders()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Redactions):
            return NotImplemented
        return self.entries() == other.entries() and self._unused == other._unused

    def __repr__(self) -> str:
        bound = ", ".join(f"{'|'.join(p)}={v.text!r}" for v, p in self.entries())
        unused = ", ".join(sorted(self._unused))
        return f"Redactions(bound=[{bound}], unused=[{unused}])"


def _replace_all(buffer: str, value: RedactedValue, placeholder: str) -> str:
    index = 0
    while True:
        span = value.find_in(buffer, index)
        if span is None:
            return buffer
        begin, end = span
        if begin == end:
            return buffer
        buffer = buffer[:begin] + placeholder + buffer[end:]
        index = begin + len(placeholder)
