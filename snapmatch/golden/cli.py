"""
Compare an actual file against a snapshot pattern.

Exit codes:
    0  actual satisfies the snapshot (or the snapshot was updated)
    1  mismatch, missing snapshot, or overwrite refused in CI
    2  invalid configuration or placeholder

Usage:
    python -m snapmatch tests/snapshots/help.txt out/help.txt

    # Redact live values:
    python -m snapmatch expected.json actual.json --redact "[ROOT]=/tmp/sandbox"

    # Accept actual as the new snapshot (refused in CI):
    python -m snapmatch expected.txt actual.txt --overwrite
"""

import argparse
import logging
import sys
from pathlib import Path

from snapmatch.core.config import load_config
from snapmatch.domain.constants import ACTION_OVERWRITE
from snapmatch.domain.errors import CIEnvironmentError, SnapshotError, SnapshotReadError

from .assertion import SnapshotAssert
from .data import Data

logger = logging.getLogger(__name__)


def _parse_redaction(raw: str) -> tuple[str, str]:
    placeholder, sep, value = raw.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected PLACEHOLDER=VALUE, got {raw!r}")
    return placeholder, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapmatch",
        description="Check that an actual file satisfies a snapshot pattern",
        epilog="Pattern syntax: [..] any text within a line, ... any lines, "
        '"{...}" any JSON value, "...": "{...}" any other keys.',
    )
    parser.add_argument("expected", type=Path, help="Snapshot (pattern) file")
    parser.add_argument("actual", type=Path, help="File holding actual output")
    parser.add_argument(
        "--unordered",
        action="store_true",
        help="Ignore the order of lines and array elements",
    )
    parser.add_argument(
        "--redact",
        action="append",
        default=[],
        type=_parse_redaction,
        metavar="PLACEHOLDER=VALUE",
        help="Replace VALUE with PLACEHOLDER in actual output (repeatable)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: ./snapmatch.yaml)",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace the snapshot with actual output on mismatch",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = load_config(args.config)
        if args.unordered:
            config.unordered = True
        config.redactions.update(dict(args.redact))
        if args.overwrite:
            config.action = ACTION_OVERWRITE
        snapshots = SnapshotAssert.from_config(config)
        actual = Data.read_from(args.actual)
    except SnapshotReadError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except SnapshotError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        snapshots.eq_path(actual, args.expected)
    except AssertionError as e:
        print(str(e))
        return 1
    except CIEnvironmentError as e:
        print(str(e), file=sys.stderr)
        return 1
    except SnapshotError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if snapshots.action == ACTION_OVERWRITE:
        print(f"{args.expected}: up to date")
    return 0


if __name__ == "__main__":
    sys.exit(main())
