"""
Snapshot file writes.

Rules:
- No partial snapshot on disk: temp -> replace
- fsync file + directory where the platform allows it
- fsync failure logs a warning and continues
- temp file cleaned up on failure, original snapshot kept
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def _fsync_dir(dir_path: Path) -> None:
    """
    fsync a directory so the rename entry is durable.

    Mostly effective on Linux; unsupported platforms only log a warning.
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(
            f"Directory fsync failed for {dir_path}: {e}. "
            f"Rename durability may not be guaranteed."
        )


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """
    Atomically replace `path` with `payload`.

    Args:
        path: Destination file
        payload: Raw bytes to store
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
        ) as f:
            f.write(payload)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )
            temp_path = Path(f.name)

        os.replace(temp_path, path)

        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def atomic_write_text(path: Path, text: str) -> None:
    """Atomically replace `path` with UTF-8 `text`, newlines written as given."""
    atomic_write_bytes(path, text.encode("utf-8"))
