"""
Snapshot artifacts.

A `Data` holds one side of a comparison in one of four formats:
- text: `str`
- json: any JSON value
- jsonl: list of JSON values, one per line
- binary: `bytes`, compared byte-for-byte only
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from snapmatch.core.fs import atomic_write_bytes
from snapmatch.domain.constants import FORMAT_BINARY, FORMAT_JSON, FORMAT_JSONL, FORMAT_TEXT
from snapmatch.domain.errors import ErrorCodes, SnapshotError, SnapshotReadError

from .structured import values_equal

logger = logging.getLogger(__name__)

FORMATS = (FORMAT_TEXT, FORMAT_JSON, FORMAT_JSONL, FORMAT_BINARY)

_SUFFIX_FORMATS = {
    ".json": FORMAT_JSON,
    ".jsonl": FORMAT_JSONL,
}


def _parse_json(text: str) -> Any:
    return json.loads(text)


def _parse_jsonl(text: str) -> list[Any]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


@dataclass(eq=False)
class Data:
    """One snapshot artifact: a format tag plus its value."""
    format: str
    value: Any
    source: Path | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.format not in FORMATS:
            raise SnapshotError(ErrorCodes.DATA_FORMAT_UNKNOWN, format=self.format)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def text(cls, value: str, source: Path | None = None) -> "Data":
        return cls(FORMAT_TEXT, value, source)

    @classmethod
    def json(cls, value: Any, source: Path | None = None) -> "Data":
        return cls(FORMAT_JSON, value, source)

    @classmethod
    def jsonl(cls, records: list[Any], source: Path | None = None) -> "Data":
        return cls(FORMAT_JSONL, list(records), source)

    @classmethod
    def binary(cls, value: bytes, source: Path | None = None) -> "Data":
        return cls(FORMAT_BINARY, bytes(value), source)

    @classmethod
    def read_from(cls, path: Path, format: str | None = None) -> "Data":
        """
        Load a snapshot file.

        Args:
            path: File to read
            format: Explicit format; inferred from the suffix when None
                (`.json`, `.jsonl`, anything else is text)

        Returns:
            Data tagged with `source=path`. Content that is not valid UTF-8
            is returned as binary.

        Raises:
            SnapshotReadError: If the file is missing, unreadable, or does
                not parse as the requested structured format
        """
        path = Path(path)
        if not path.exists():
            raise SnapshotReadError(ErrorCodes.SNAPSHOT_MISSING, path=str(path))
        try:
            payload = path.read_bytes()
        except OSError as e:
            raise SnapshotReadError(
                ErrorCodes.SNAPSHOT_UNREADABLE,
                path=str(path),
                reason=str(e),
            ) from e

        if format is None:
            format = _SUFFIX_FORMATS.get(path.suffix.lower(), FORMAT_TEXT)
        if format == FORMAT_BINARY:
            return cls.binary(payload, source=path)

        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug(f"{path} is not valid UTF-8, comparing as binary")
            return cls.binary(payload, source=path)

        if format == FORMAT_TEXT:
            return cls.text(text, source=path)

        try:
            value = _parse_jsonl(text) if format == FORMAT_JSONL else _parse_json(text)
        except ValueError as e:
            raise SnapshotReadError(
                ErrorCodes.SNAPSHOT_UNREADABLE,
                path=str(path),
                format=format,
                reason=str(e),
            ) from e
        return cls(format, value, source=path)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    @property
    def is_structured(self) -> bool:
        return self.format in (FORMAT_JSON, FORMAT_JSONL)

    def render(self) -> str:
        """
        Text form used for diffs and for writing snapshots.

        JSON is indented by two spaces with a trailing newline; JSON Lines
        is one compact record per line. Binary renders as a size marker.
        """
        if self.format == FORMAT_TEXT:
            return self.value
        if self.format == FORMAT_JSON:
            return json.dumps(self.value, indent=2, ensure_ascii=False) + "\n"
        if self.format == FORMAT_JSONL:
            return "".join(json.dumps(record, ensure_ascii=False) + "\n" for record in self.value)
        return f"<{len(self.value)} bytes of binary data>"

    def to_bytes(self) -> bytes:
        if self.format == FORMAT_BINARY:
            return self.value
        return self.render().encode("utf-8")

    def write_to(self, path: Path) -> None:
        """Atomically write the artifact to `path`."""
        path = Path(path)
        atomic_write_bytes(path, self.to_bytes())
        logger.debug(f"Wrote {self.format} snapshot to {path}")

    def coerce_to(self, format: str) -> "Data":
        """
        Convert to another format where possible.

        Text parses into json/jsonl; structured data renders to text;
        binary decodes to text when it is valid UTF-8. A conversion that
        fails returns the artifact unchanged.
        """
        if format == self.format:
            return self
        if format not in FORMATS:
            raise SnapshotError(ErrorCodes.DATA_FORMAT_UNKNOWN, format=format)

        if format == FORMAT_BINARY:
            return Data.binary(self.to_bytes(), source=self.source)

        if self.format == FORMAT_BINARY:
            try:
                text = Data.text(self.value.decode("utf-8"), source=self.source)
            except UnicodeDecodeError:
                return self
            return text.coerce_to(format)

        if format == FORMAT_TEXT:
            return Data.text(self.render(), source=self.source)

        if self.format == FORMAT_TEXT:
            try:
                if format == FORMAT_JSONL:
                    return Data.jsonl(_parse_jsonl(self.value), source=self.source)
                return Data.json(_parse_json(self.value), source=self.source)
            except ValueError:
                return self

        # json <-> jsonl
        if format == FORMAT_JSONL and isinstance(self.value, list):
            return Data.jsonl(self.value, source=self.source)
        if format == FORMAT_JSON:
            return Data.json(list(self.value), source=self.source)
        return self

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Data):
            return NotImplemented
        if self.format != other.format:
            return False
        if self.is_structured:
            return values_equal(self.value, other.value)
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]
