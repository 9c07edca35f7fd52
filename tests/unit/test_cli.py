#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for the command line interface."""

import io
import logging
from pathlib import Path

import pytest

from redactmd.cli import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_FILE_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    create_parser,
    get_exit_code_for_exception,
    main,
    should_use_rich_output,
)
from redactmd.exceptions import (
    DependencyError,
    FileError,
    ParsingError,
    RedactionCountMismatchError,
    UnknownRedactionTypeError,
    ValidationError,
)

SOURCE = "See [a link](http://x.com) here\n"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no discoverable configuration."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", home.as_posix())
    monkeypatch.delenv("REDACTMD_CONFIG", raising=False)
    monkeypatch.delenv("REDACTMD_LOG_LEVEL", raising=False)
    monkeypatch.chdir(work)
    (work / "source.md").write_text(SOURCE, encoding="utf-8")
    return work


@pytest.mark.cli
class TestRedactCommand:
    """Test the redact subcommand."""

    def test_redact_to_stdout(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test printing the redacted copy."""
        assert main(["redact", "source.md"]) == EXIT_SUCCESS

        assert capsys.readouterr().out == "See [0] here\n"

    def test_redact_to_file(self, workdir: Path) -> None:
        """Test writing the redacted copy with -o."""
        assert main(["redact", "source.md", "-o", "redacted.md"]) == EXIT_SUCCESS

        assert (workdir / "redacted.md").read_text(encoding="utf-8") == "See [0] here\n"

    def test_redact_from_stdin(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        """Test reading the source from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("![x](y.png)"))

        assert main(["redact", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "[0]\n"

    def test_missing_source(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that an unreadable source is a file error."""
        assert main(["redact", "absent.md"]) == EXIT_FILE_ERROR
        assert "Error:" in capsys.readouterr().err


@pytest.mark.cli
class TestRestoreCommand:
    """Test the restore subcommand."""

    def test_restore_round_trip(self, workdir: Path) -> None:
        """Test redacting then restoring through files."""
        assert main(["redact", "source.md", "-o", "redacted.md"]) == EXIT_SUCCESS
        assert main(["restore", "source.md", "redacted.md", "-o", "restored.md"]) == EXIT_SUCCESS

        assert (workdir / "restored.md").read_text(encoding="utf-8") == SOURCE

    def test_restore_edited_copy_from_stdin(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        """Test reading the redacted copy from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("Read [the page][0] now"))

        assert main(["restore", "source.md", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Read [the page](http://x.com) now\n"

    def test_two_stdin_inputs(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that only one input may come from stdin."""
        assert main(["restore", "-", "-"]) == EXIT_VALIDATION_ERROR
        assert "stdin" in capsys.readouterr().err

    def test_count_mismatch(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a deleted placeholder fails without output."""
        (workdir / "redacted.md").write_text("No placeholders left\n", encoding="utf-8")

        assert main(["restore", "source.md", "redacted.md", "-o", "restored.md"]) == EXIT_RENDERING_ERROR
        assert not (workdir / "restored.md").exists()
        assert "1 redaction(s)" in capsys.readouterr().err


@pytest.mark.cli
class TestConfiguration:
    """Test configuration handling in the CLI."""

    def test_config_renderer_options(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a discovered config sets renderer options."""
        (workdir / ".redactmd.toml").write_text('[markdown]\nbullet_symbols = "-"\n', encoding="utf-8")
        (workdir / "list.md").write_text("- [a](u)\n", encoding="utf-8")

        assert main(["redact", "list.md"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "- [0]\n"

    def test_invalid_config(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a broken config file stops the command."""
        (workdir / "bad.json").write_text("{broken", encoding="utf-8")

        assert main(["--config", "bad.json", "redact", "source.md"]) == EXIT_VALIDATION_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_unknown_config_option(self, workdir: Path) -> None:
        """Test that unknown options are reported as validation errors."""
        (workdir / "opts.yaml").write_text("markdown:\n  fancy: true\n", encoding="utf-8")

        assert main(["--config", "opts.yaml", "redact", "source.md"]) == EXIT_VALIDATION_ERROR

    def test_missing_config(self, workdir: Path) -> None:
        """Test that a missing --config file is a file error."""
        assert main(["--config", "absent.toml", "redact", "source.md"]) == EXIT_FILE_ERROR

    def test_log_level_from_config(self, workdir: Path) -> None:
        """Test that log_level in the config sets the root level."""
        (workdir / ".redactmd.yaml").write_text("log_level: INFO\n", encoding="utf-8")

        assert main(["redact", "source.md"]) == EXIT_SUCCESS
        assert logging.getLogger().level == logging.INFO

    def test_trace_overrides_log_level(self, workdir: Path) -> None:
        """Test that --trace enables debug logging."""
        assert main(["--log-level", "error", "--trace", "redact", "source.md"]) == EXIT_SUCCESS
        assert logging.getLogger().level == logging.DEBUG

    def test_log_file(self, workdir: Path) -> None:
        """Test that --log-file receives log records."""
        log_path = workdir / "run.log"

        assert main(["--log-level", "DEBUG", "--log-file", str(log_path), "redact", "source.md"]) == EXIT_SUCCESS
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "redaction placeholder" in log_path.read_text(encoding="utf-8")


@pytest.mark.cli
class TestRichOutput:
    """Test formatted terminal output."""

    def test_forced_rich_output(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that --force-rich formats output even when captured."""
        assert main(["--rich", "--force-rich", "redact", "source.md"]) == EXIT_SUCCESS

        assert "See [0] here" in capsys.readouterr().out

    def test_rich_disabled_when_piped(self, workdir: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that --rich alone falls back to plain output off a TTY."""
        assert main(["--rich", "redact", "source.md"]) == EXIT_SUCCESS

        assert capsys.readouterr().out == "See [0] here\n"

    def test_rich_missing(self, workdir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        """Test that --rich without the package is a dependency error."""
        monkeypatch.setattr("redactmd.cli.check_rich_available", lambda: False)

        assert main(["--rich", "redact", "source.md"]) == EXIT_DEPENDENCY_ERROR
        assert "pip install redactmd[rich]" in capsys.readouterr().err

    def test_tty_detection(self) -> None:
        """Test the TTY check against a stream."""

        class FakeTTY(io.StringIO):
            def isatty(self) -> bool:
                return True

        args = create_parser().parse_args(["--rich", "redact", "source.md"])

        assert should_use_rich_output(args, FakeTTY()) is True
        assert should_use_rich_output(args, io.StringIO()) is False


@pytest.mark.cli
class TestParser:
    """Test argument parsing."""

    def test_subcommand_required(self) -> None:
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_restore_needs_two_inputs(self) -> None:
        """Test that restore takes source and redacted inputs."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["restore", "source.md"])

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "redactmd" in capsys.readouterr().out


@pytest.mark.cli
class TestExitCodes:
    """Test the exception to exit code mapping."""

    @pytest.mark.parametrize(
        "exception,code",
        [
            (DependencyError("rich-output", [("rich", "")]), 2),
            (ValidationError("bad"), 3),
            (FileError("missing"), 4),
            (ParsingError("broken"), 6),
            (RedactionCountMismatchError(2, 1), 7),
            (UnknownRedactionTypeError("redactedvideo"), 7),
            (RuntimeError("other"), 1),
        ],
    )
    def test_mapping(self, exception: Exception, code: int) -> None:
        """Test each exception family."""
        assert get_exit_code_for_exception(exception) == code
