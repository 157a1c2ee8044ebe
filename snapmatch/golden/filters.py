"""
Text filters applied to both sides before comparison.

- Line endings: CRLF / CR -> LF
- Path separators: backslash -> forward slash

Note: path normalization cannot tell a separator from any other backslash
and rewrites both.
"""

from collections.abc import Callable
from typing import Any


def normalize_lines(text: str) -> str:
    """Normalize line endings to `\\n`."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_paths(text: str) -> str:
    """Normalize path separators to `/`."""
    return text.replace("\\", "/")


def normalize_text(text: str) -> str:
    """Line endings and path separators."""
    return normalize_paths(normalize_lines(text))


def filter_value(value: Any, op: Callable[[str], str]) -> Any:
    """
    Apply a text filter to every string inside a JSON-like tree.

    Object keys are left untouched.
    """
    if isinstance(value, str):
        return op(value)
    if isinstance(value, list):
        return [filter_value(item, op) for item in value]
    if isinstance(value, dict):
        return {k: filter_value(v, op) for k, v in value.items()}
    return value
