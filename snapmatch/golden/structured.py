"""
Structural pattern matching over JSON-like trees.

The tree counterpart of `pattern.py`:
- `"{...}"` as a value matches any value
- `"{...}"` as an array element matches zero or more elements
- `"...": "{...}"` in an object matches any keys not listed
- strings are matched with the line-oriented aligner

Values that satisfy their pattern are replaced with the pattern's value;
the rest is kept as actual. Inputs are never mutated.
"""

from typing import Any

from snapmatch.domain.constants import KEY_WILDCARD, VALUE_WILDCARD

from .pattern import normalize_to_pattern, normalize_to_pattern_unordered
from .redactions import Redactions


def values_equal(left: Any, right: Any) -> bool:
    """
    Type-strict structural equality.

    Unlike `==`, `True` does not equal `1` and `1` does not equal `1.0`.
    """
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            values_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, list):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    return left == right


def is_value_wildcard(value: Any) -> bool:
    return isinstance(value, str) and value == VALUE_WILDCARD


def normalize_value(actual: Any, expected: Any, redactions: Redactions | None = None) -> Any:
    """
    Normalize a tree towards `expected`, preserving array order.

    Args:
        actual: Actual tree (dict / list / str / int / float / bool / None)
        expected: Expected pattern tree
        redactions: Registry of placeholders

    Returns:
        Normalized tree; `values_equal(result, expected)` if and only if
        `actual` satisfies the pattern
    """
    if redactions is None:
        redactions = Redactions()
    return _normalize(actual, expected, redactions, unordered=False)


def normalize_value_unordered(actual: Any, expected: Any, redactions: Redactions | None = None) -> Any:
    """Like `normalize_value`, but arrays and text are compared as multisets."""
    if redactions is None:
        redactions = Redactions()
    return _normalize(actual, expected, redactions, unordered=True)


def _normalize(actual: Any, expected: Any, redactions: Redactions, unordered: bool) -> Any:
    if is_value_wildcard(expected):
        return VALUE_WILDCARD

    if isinstance(actual, str) and isinstance(expected, str):
        if unordered:
            return normalize_to_pattern_unordered(actual, expected, redactions)
        return normalize_to_pattern(actual, expected, redactions)

    if isinstance(actual, list) and isinstance(expected, list):
        if unordered:
            return _normalize_array_unordered(actual, expected, redactions)
        return _normalize_array(actual, expected, redactions)

    if isinstance(actual, dict) and isinstance(expected, dict):
        return _normalize_object(actual, expected, redactions, unordered)

    # Scalars, or mismatched kinds: never coerced
    return actual


def _matches(actual: Any, expected: Any, redactions: Redactions, unordered: bool) -> tuple[bool, Any]:
    candidate = _normalize(actual, expected, redactions, unordered)
    return values_equal(candidate, expected), candidate


# =============================================================================
# Objects
# =============================================================================


def _normalize_object(
    actual: dict[str, Any],
    expected: dict[str, Any],
    redactions: Redactions,
    unordered: bool,
) -> dict[str, Any]:
    has_key_wildcard = is_value_wildcard(expected.get(KEY_WILDCARD))

    redacted_keys = {
        raw_key: redactions.redact(raw_key) if isinstance(raw_key, str) else raw_key
        for raw_key in actual
    }
    # One actual key owns each redacted name: the key already spelled that
    # way, otherwise the first one. The others stay verbatim for the diff.
    owners: dict[Any, Any] = {}
    for raw_key, key in redacted_keys.items():
        if key not in owners or raw_key == key:
            owners[key] = raw_key

    normalized: dict[str, Any] = {}
    for raw_key, value in actual.items():
        key = redacted_keys[raw_key]
        if owners[key] != raw_key:
            normalized[raw_key] = value
            continue
        if key in expected:
            normalized[key] = _normalize(value, expected[key], redactions, unordered)
        elif not has_key_wildcard:
            # Unlisted key with no wildcard: keep it so the diff shows it
            normalized[key] = value

    if has_key_wildcard:
        normalized[KEY_WILDCARD] = VALUE_WILDCARD
    return normalized


# =============================================================================
# Arrays
# =============================================================================


def _split_runs(expected: list[Any]) -> list[list[Any]]:
    runs: list[list[Any]] = [[]]
    for item in expected:
        if is_value_wildcard(item):
            runs.append([])
        else:
            runs[-1].append(item)
    return runs


def _normalize_array(actual: list[Any], expected: list[Any], redactions: Redactions) -> list[Any]:
    """
    Ordered array alignment.

    The pattern is split into runs separated by `"{...}"`. The leading run
    aligns positionally; every later run is located as a contiguous block
    after the previous one. A run that cannot be located stops alignment
    and the rest of `actual` is appended untouched.
    """
    runs = _split_runs(expected)

    normalized: list[Any] = []
    position = 0
    for index, run in enumerate(runs):
        if index == 0:
            for a, e in zip(actual, run):
                normalized.append(_normalize(a, e, redactions, unordered=False))
            position = min(len(actual), len(run))
            continue

        is_last = index == len(runs) - 1
        if not run:
            normalized.append(VALUE_WILDCARD)
            if is_last:
                position = len(actual)
            continue

        start = _locate_run(actual, position, run, redactions, anchor_tail=is_last)
        if start is None:
            break

        normalized.append(VALUE_WILDCARD)
        for a, e in zip(actual[start:start + len(run)], run):
            normalized.append(_normalize(a, e, redactions, unordered=False))
        position = start + len(run)

    normalized.extend(actual[position:])
    return normalized


def _locate_run(
    actual: list[Any],
    position: int,
    run: list[Any],
    redactions: Redactions,
    anchor_tail: bool,
) -> int | None:
    last_start = len(actual) - len(run)
    if anchor_tail and last_start >= position and _run_matches(actual, last_start, run, redactions):
        return last_start
    for start in range(position, last_start + 1):
        if _run_matches(actual, start, run, redactions):
            return start
    return None


def _run_matches(actual: list[Any], start: int, run: list[Any], redactions: Redactions) -> bool:
    return all(
        _matches(actual[start + offset], e, redactions, unordered=False)[0]
        for offset, e in enumerate(run)
    )


def _normalize_array_unordered(actual: list[Any], expected: list[Any], redactions: Redactions) -> list[Any]:
    """
    Multiset array alignment.

    Each pattern element consumes at most one matching actual element.
    Unmatched pattern elements are dropped; leftovers are appended unless
    the pattern holds a `"{...}"`.
    """
    remaining = list(actual)
    normalized: list[Any] = []
    elided = False
    for e in expected:
        if is_value_wildcard(e):
            elided = True
            normalized.append(VALUE_WILDCARD)
            continue
        for position, a in enumerate(remaining):
            matched, candidate = _matches(a, e, redactions, unordered=True)
            if matched:
                normalized.append(candidate)
                del remaining[position]
                break

    if not elided:
        normalized.extend(remaining)
    return normalized
