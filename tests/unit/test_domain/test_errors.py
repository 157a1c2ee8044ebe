"""
test_errors.py - error type tests
"""

import pytest

from snapmatch.domain.errors import (
    CIEnvironmentError,
    ConfigError,
    ErrorCodes,
    InvalidPlaceholderError,
    SnapshotError,
    SnapshotReadError,
)


class TestSnapshotError:
    """SnapshotError formatting."""

    def test_message_with_context(self):
        """Code and context appear in the message."""
        error = SnapshotError(ErrorCodes.CONFIG_INVALID, key="action", value="update")

        assert str(error) == "[CONFIG_INVALID] key='action', value='update'"

    def test_message_without_context(self):
        """Code alone."""
        assert str(SnapshotError(ErrorCodes.SNAPSHOT_MISSING)) == "[SNAPSHOT_MISSING]"

    def test_to_dict(self):
        """Serialized with code and context."""
        error = SnapshotReadError(ErrorCodes.SNAPSHOT_MISSING, path="a.txt")

        assert error.to_dict() == {"code": "SNAPSHOT_MISSING", "path": "a.txt"}

    @pytest.mark.parametrize("error_type", [InvalidPlaceholderError, ConfigError, SnapshotReadError])
    def test_subclasses(self, error_type: type[SnapshotError]):
        """Every specific error is a SnapshotError."""
        error = error_type(ErrorCodes.CONFIG_INVALID)

        assert isinstance(error, SnapshotError)
        assert error.code == ErrorCodes.CONFIG_INVALID

    def test_placeholder_error_is_value_error(self):
        """Placeholder errors are also ValueErrors."""
        assert isinstance(InvalidPlaceholderError(ErrorCodes.PLACEHOLDER_INVALID_CHARS), ValueError)

    def test_ci_error_is_runtime_error(self):
        """The CI guard error stands apart from SnapshotError."""
        assert issubclass(CIEnvironmentError, RuntimeError)
        assert not issubclass(CIEnvironmentError, SnapshotError)
