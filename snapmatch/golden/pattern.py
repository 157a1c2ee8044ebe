"""
Line-oriented pattern matching.

Normalizes actual text towards an expected pattern:
- `[..]` inside a line matches any run of characters on that line
- `...` on a line of its own matches zero or more whole lines
- placeholders are matched through the Redactions registry

Every line that satisfies its pattern line is replaced with the pattern
line's text, everything else is left as (redacted) actual text. The caller
then compares the result with the pattern byte-for-byte.

Both aligners are total: they never raise on a mismatch and never drop
actual content they cannot account for.
"""

from snapmatch.domain.constants import LINE_ELIDE, LINE_WILDCARD

from .redactions import Redactions

_ELIDE_LINES = (LINE_ELIDE, LINE_ELIDE + "\n")


def split_lines(text: str) -> list[str]:
    """Split on `\\n` only, keeping each line's terminator."""
    if not text:
        return []
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def is_line_elide(line: str) -> bool:
    return line in _ELIDE_LINES


def line_matches(actual_line: str, pattern_line: str, redactions: Redactions | None = None) -> bool:
    """
    Test one actual line against one pattern line.

    The search is greedy and does not backtrack: each section after a
    wildcard is located by its first occurrence. Patterns with repeated
    anchors may therefore fail to match text a backtracking matcher would
    accept.

    Args:
        actual_line: Line of actual output
        pattern_line: Line of the expected pattern
        redactions: Registry used to redact the actual line and clear
            unused placeholders from the pattern line

    Returns:
        True if the actual line satisfies the pattern line
    """
    if actual_line == pattern_line:
        return True
    if redactions is None:
        redactions = Redactions()
    line = redactions.redact(actual_line)
    return _sections_match(line, _pattern_sections(pattern_line, redactions))


def _pattern_sections(pattern_line: str, redactions: Redactions) -> list[str]:
    prepared = redactions.canonicalize(redactions.clear_unused(pattern_line))
    return prepared.split(LINE_WILDCARD)


def _sections_match(line: str, sections: list[str]) -> bool:
    remaining = line
    last = len(sections) - 1
    for index, section in enumerate(sections):
        if not remaining.startswith(section):
            return False
        remainder = remaining[len(section):]
        if index == last:
            return remainder == ""

        next_section = sections[index + 1]
        if not next_section:
            # `[..]` at the end swallows the rest; `[..][..]` is one wildcard
            remaining = "" if index + 1 == last else remainder
            continue

        restart = remainder.find(next_section)
        if restart == -1:
            return False
        remaining = remainder[restart:]

    return False


class _PatternLines:
    """Pattern lines with their wildcard sections computed once."""

    def __init__(self, pattern: str, redactions: Redactions):
        self.lines = split_lines(pattern)
        self.redactions = redactions
        self._sections: dict[int, list[str]] = {}

    def __len__(self) -> int:
        return len(self.lines)

    def is_elide(self, index: int) -> bool:
        return is_line_elide(self.lines[index])

    def matches(self, line: str, index: int) -> bool:
        """`line` must already be redacted."""
        pattern_line = self.lines[index]
        if line == pattern_line:
            return True
        sections = self._sections.get(index)
        if sections is None:
            sections = _pattern_sections(pattern_line, self.redactions)
            self._sections[index] = sections
        return _sections_match(line, sections)


# =============================================================================
# Ordered
# =============================================================================


def normalize_to_pattern(input: str, pattern: str, redactions: Redactions | None = None) -> str:
    """
    Normalize `input` towards `pattern`, preserving line order.

    Walks both texts line by line. `...` absorbs actual lines up to the
    first one matching the next pattern line. On a divergence the walk
    resynchronizes on the next pair of lines that match again; the skipped
    actual lines are kept verbatim. When no resync point exists the rest of
    the input is emitted unchanged.

    Args:
        input: Actual text (newline-normalized)
        pattern: Expected text
        redactions: Registry of placeholders

    Returns:
        Normalized text; equal to `pattern` if and only if `input` satisfies it
    """
    if input == pattern:
        return input
    if redactions is None:
        redactions = Redactions()

    input_lines = split_lines(redactions.redact(input))
    pattern_lines = _PatternLines(pattern, redactions)

    normalized: list[str] = []
    a = 0
    p = 0
    while p < len(pattern_lines):
        pattern_line = pattern_lines.lines[p]
        if pattern_lines.is_elide(p):
            if p + 1 == len(pattern_lines):
                # Everything after a trailing `...` is unconstrained
                normalized.append(pattern_line)
                a = len(input_lines)
                break
            if pattern_lines.is_elide(p + 1):
                normalized.append(pattern_line)
                p += 1
                continue
            found = _find_line(input_lines, a, pattern_lines, p + 1)
            if found is not None:
                normalized.append(pattern_line)
                a = found
                p += 1
                continue
        elif a >= len(input_lines):
            # Input ran out; the missing pattern lines show up in the diff
            break
        elif pattern_lines.matches(input_lines[a], p):
            normalized.append(pattern_line)
            a += 1
            p += 1
            continue

        resync = _resync(input_lines, a, pattern_lines, p)
        if resync is None:
            break
        next_a, next_p = resync
        normalized.extend(input_lines[a:next_a])
        a, p = next_a, next_p

    normalized.extend(input_lines[a:])
    return "".join(normalized)


def _find_line(input_lines: list[str], start: int, pattern_lines: _PatternLines, index: int) -> int | None:
    for offset in range(start, len(input_lines)):
        if pattern_lines.matches(input_lines[offset], index):
            return offset
    return None


def _resync(
    input_lines: list[str],
    a: int,
    pattern_lines: _PatternLines,
    p: int,
) -> tuple[int, int] | None:
    """
    Find where input and pattern line up again after a divergence.

    Prefers the earliest actual line that matches some later literal pattern
    line; falls back to jumping to the next `...`, which can absorb the rest.
    """
    for next_a in range(a, len(input_lines)):
        line = input_lines[next_a]
        for next_p in range(p, len(pattern_lines)):
            if next_a == a and next_p == p:
                continue
            if pattern_lines.is_elide(next_p):
                continue
            if pattern_lines.matches(line, next_p):
                return next_a, next_p

    for next_p in range(p + 1, len(pattern_lines)):
        if pattern_lines.is_elide(next_p):
            return a, next_p

    return None


# Short aliases
align_ordered = normalize_to_pattern


# =============================================================================
# Unordered
# =============================================================================


def normalize_to_pattern_unordered(input: str, pattern: str, redactions: Redactions | None = None) -> str:
    """
    Normalize `input` towards `pattern`, ignoring line order.

    Actual lines form a multiset. Each pattern line consumes at most one
    matching actual line and takes the pattern's position; pattern lines
    without a match are dropped. Unconsumed actual lines are appended unless
    the pattern holds a `...`, which covers them.

    Returns:
        Normalized text; equal to `pattern` if and only if `input` satisfies it
    """
    if input == pattern:
        return input
    if redactions is None:
        redactions = Redactions()

    input_lines = split_lines(redactions.redact(input))
    pattern_lines = _PatternLines(pattern, redactions)

    normalized: list[str] = []
    elided = False
    for index, pattern_line in enumerate(pattern_lines.lines):
        if pattern_lines.is_elide(index):
            elided = True
            normalized.append(pattern_line)
            continue
        for position, line in enumerate(input_lines):
            if pattern_lines.matches(line, index):
                del input_lines[position]
                normalized.append(pattern_line)
                break

    if not elided:
        normalized.extend(input_lines)
    return "".join(normalized)


align_unordered = normalize_to_pattern_unordered
