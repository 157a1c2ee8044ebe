"""
test_cli.py - command line tests
"""

from pathlib import Path

import pytest

from snapmatch.golden.cli import main


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Working directory without a snapmatch.yaml."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestCli:
    """snapmatch EXPECTED ACTUAL."""

    def test_match(self, workdir: Path):
        """Exit 0 when actual satisfies the snapshot."""
        expected = _write(workdir / "expected.txt", "Hello\n...\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual)]) == 0

    def test_mismatch(self, workdir: Path, capsys: pytest.CaptureFixture[str]):
        """Exit 1 and a diff on mismatch."""
        expected = _write(workdir / "expected.txt", "Hello\nMoon\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual)]) == 1

        out = capsys.readouterr().out
        assert "-Moon" in out
        assert "+World" in out

    def test_unordered(self, workdir: Path):
        """--unordered ignores line order."""
        expected = _write(workdir / "expected.txt", "a\nb\n")
        actual = _write(workdir / "actual.txt", "b\na\n")

        assert main([str(expected), str(actual)]) == 1
        assert main([str(expected), str(actual), "--unordered"]) == 0

    def test_redact(self, workdir: Path):
        """--redact binds a placeholder."""
        expected = _write(workdir / "expected.txt", "at [ROOT]/out\n")
        actual = _write(workdir / "actual.txt", "at /tmp/sandbox/out\n")

        assert main([str(expected), str(actual), "--redact", "[ROOT]=/tmp/sandbox"]) == 0

    def test_invalid_placeholder(self, workdir: Path, capsys: pytest.CaptureFixture[str]):
        """Exit 2 for a malformed placeholder."""
        expected = _write(workdir / "expected.txt", "a\n")
        actual = _write(workdir / "actual.txt", "a\n")

        assert main([str(expected), str(actual), "--redact", "root=/tmp"]) == 2
        assert "CONFIG_INVALID" in capsys.readouterr().err

    def test_redact_without_value(self, workdir: Path):
        """--redact needs PLACEHOLDER=VALUE."""
        with pytest.raises(SystemExit) as exc_info:
            main(["expected.txt", "actual.txt", "--redact", "[ROOT]"])

        assert exc_info.value.code == 2

    def test_json_files(self, workdir: Path):
        """`.json` files compare structurally."""
        expected = _write(workdir / "expected.json", '{"id": 1, "...": "{...}"}')
        actual = _write(workdir / "actual.json", '{"id": 1, "extra": true}')

        assert main([str(expected), str(actual)]) == 0

    def test_config_file(self, workdir: Path):
        """Redactions can come from a config file."""
        config = _write(workdir / "custom.yaml", 'redactions:\n  "[USER]": alice\n')
        expected = _write(workdir / "expected.txt", "hi [USER]\n")
        actual = _write(workdir / "actual.txt", "hi alice\n")

        assert main([str(expected), str(actual), "--config", str(config)]) == 0

    def test_missing_actual(self, workdir: Path, capsys: pytest.CaptureFixture[str]):
        """Exit 1 when the actual file does not exist."""
        expected = _write(workdir / "expected.txt", "a\n")

        assert main([str(expected), str(workdir / "nope.txt")]) == 1
        assert "SNAPSHOT_MISSING" in capsys.readouterr().err

    def test_missing_snapshot(self, workdir: Path):
        """Exit 1 when the snapshot does not exist."""
        actual = _write(workdir / "actual.txt", "a\n")

        assert main([str(workdir / "expected.txt"), str(actual)]) == 1

    def test_overwrite(self, workdir: Path, no_ci: None, capsys: pytest.CaptureFixture[str]):
        """--overwrite replaces a mismatching snapshot."""
        expected = _write(workdir / "expected.txt", "Hello\nMoon\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual), "--overwrite"]) == 0

        assert expected.read_text(encoding="utf-8") == "Hello\nWorld\n"
        assert "up to date" in capsys.readouterr().out

    def test_overwrite_refused_in_ci(self, workdir: Path, in_ci: None, capsys: pytest.CaptureFixture[str]):
        """--overwrite exits 1 in CI and keeps the snapshot."""
        expected = _write(workdir / "expected.txt", "Hello\nMoon\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual), "--overwrite"]) == 1

        assert expected.read_text(encoding="utf-8") == "Hello\nMoon\n"
        assert "Refusing to overwrite" in capsys.readouterr().err

    def test_config_action_kept(self, workdir: Path, no_ci: None):
        """The config file's action applies without --overwrite."""
        _write(workdir / "snapmatch.yaml", "action: overwrite\n")
        expected = _write(workdir / "expected.txt", "Hello\nMoon\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual)]) == 0

        assert expected.read_text(encoding="utf-8") == "Hello\nWorld\n"

    def test_config_ignore(self, workdir: Path):
        """action: ignore reports a mismatch without failing."""
        _write(workdir / "snapmatch.yaml", "action: ignore\n")
        expected = _write(workdir / "expected.txt", "Hello\nMoon\n")
        actual = _write(workdir / "actual.txt", "Hello\nWorld\n")

        assert main([str(expected), str(actual)]) == 0

        assert expected.read_text(encoding="utf-8") == "Hello\nMoon\n"

    def test_overwrite_keeps_placeholders(self, workdir: Path, no_ci: None):
        """--overwrite keeps placeholders bound with --redact."""
        expected = _write(workdir / "expected.txt", "at [ROOT]/out\nOld\n")
        actual = _write(workdir / "actual.txt", "at /tmp/sandbox/out\nNew\n")

        assert main([str(expected), str(actual), "--overwrite", "--redact", "[ROOT]=/tmp/sandbox"]) == 0

        assert expected.read_text(encoding="utf-8") == "at [ROOT]/out\nNew\n"
