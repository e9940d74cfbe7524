"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from roslyn_test_updater.__main__ import main, parse_args

BOM = b"\xef\xbb\xbf"

SOURCE = (
    "class C\r\n"
    "{\r\n"
    "    void M()\r\n"
    "    {\r\n"
    "        comp.VerifyDiagnostics(\r\n"
    "            Diagnostic(ErrorCode.ERR_A).WithLocation(1, 2));\r\n"
    "    }\r\n"
    "}\r\n"
)


def write_log(tmp_path: Path, source: Path) -> Path:
    """Write a test output reporting one failure in ``source``."""
    log = tmp_path / "TestOutput.txt"
    log.write_text(
        "[xUnit.net 00:00:01.00]     Ns.C.M [FAIL]\n"
        "[xUnit.net 00:00:01.00]       Expected:\n"
        "[xUnit.net 00:00:01.00]           Diagnostic(ErrorCode.ERR_A).WithLocation(1, 2)\n"
        "[xUnit.net 00:00:01.00]       Actual:\n"
        "[xUnit.net 00:00:01.00]           Diagnostic(ErrorCode.ERR_B).WithLocation(3, 4)\n"
        "[xUnit.net 00:00:01.00]       Diff:\n"
        "[xUnit.net 00:00:01.00]       Stack Trace:\n"
        f"[xUnit.net 00:00:01.00]         {source}(5,0): at Ns.C.M()\n",
        encoding="utf-8",
    )
    return log


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a source file and run from a scratch directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "C.cs").write_bytes(BOM + SOURCE.encode("utf-8"))
    return tmp_path


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self) -> None:
        """Test default argument values."""
        args = parse_args([])
        assert args.input is None
        assert args.config is None
        assert args.no_playlist is False
        assert args.dry_run is False
        assert args.debug is False
        assert args.format is None

    def test_all_flags(self) -> None:
        """Test every flag is parsed."""
        args = parse_args(
            [
                "-i", "out.txt", "--no-playlist", "--dry-run",
                "-c", "cfg.yaml", "-d", "--format", "json",
            ]
        )
        assert args.input == Path("out.txt")
        assert args.config == Path("cfg.yaml")
        assert args.no_playlist is True
        assert args.dry_run is True
        assert args.debug is True
        assert args.format == "json"

    def test_invalid_format(self) -> None:
        """Test unknown log formats are rejected."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--format", "xml"])
        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the program version."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("roslyn-test-updater ")


class TestMain:
    """Tests for main."""

    def test_updates_source_and_writes_playlist(self, workspace: Path) -> None:
        """Test a run rewrites the file with BOM and CRLF intact."""
        log = write_log(workspace, workspace / "C.cs")

        assert main(["--input", str(log)]) == 0

        updated = (workspace / "C.cs").read_bytes()
        assert updated.startswith(BOM)
        assert b"Diagnostic(ErrorCode.ERR_B).WithLocation(3, 4));\r\n" in updated
        assert b"ERR_A" not in updated
        playlist = (workspace / "RoslynTestUpdater.playlist").read_text(encoding="utf-8")
        assert 'Value="Ns.C"' in playlist

    def test_no_playlist(self, workspace: Path) -> None:
        """Test --no-playlist suppresses the playlist."""
        log = write_log(workspace, workspace / "C.cs")

        assert main(["--input", str(log), "--no-playlist"]) == 0

        assert not (workspace / "RoslynTestUpdater.playlist").exists()

    def test_dry_run(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --dry-run prints the patch and leaves files untouched."""
        log = write_log(workspace, workspace / "C.cs")

        assert main(["--input", str(log), "--dry-run"]) == 0

        out = capsys.readouterr().out
        assert "+            Diagnostic(ErrorCode.ERR_B).WithLocation(3, 4));" in out
        assert "(new file)" in out
        assert (workspace / "C.cs").read_bytes() == BOM + SOURCE.encode("utf-8")
        assert not (workspace / "RoslynTestUpdater.playlist").exists()

    def test_reads_stdin(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the log is read from standard input by default."""
        log = write_log(workspace, workspace / "C.cs")
        with log.open(encoding="utf-8") as stdin:
            monkeypatch.setattr("sys.stdin", stdin)
            assert main(["--no-playlist"]) == 0

        assert b"ERR_B" in (workspace / "C.cs").read_bytes()

    def test_missing_input(self, workspace: Path) -> None:
        """Test a missing input file is an error."""
        assert main(["--input", str(workspace / "missing.txt")]) == 1

    def test_missing_config(self, workspace: Path) -> None:
        """Test a missing configuration file is an error."""
        log = write_log(workspace, workspace / "C.cs")
        assert main(["--input", str(log), "--config", str(workspace / "missing.yaml")]) == 1

    def test_config_file(self, workspace: Path) -> None:
        """Test settings are taken from the configuration file."""
        log = write_log(workspace, workspace / "C.cs")
        config = workspace / "config.yaml"
        config.write_text(
            "output:\n  playlist_name: Failed.playlist\nlogging:\n  format: json\n",
            encoding="utf-8",
        )

        assert main(["--input", str(log), "--config", str(config)]) == 0

        assert (workspace / "Failed.playlist").exists()

    def test_malformed_log_aborts(self, workspace: Path) -> None:
        """Test a malformed stack frame aborts with a non-zero exit code."""
        log = workspace / "TestOutput.txt"
        log.write_text(
            "Ns.C.M [FAIL]\nActual:\nDiff:\nStack Trace:\n  C.cs(x,0): at Ns.C.M()\n",
            encoding="utf-8",
        )

        assert main(["--input", str(log)]) == 1


class TestLoggingSettings:
    """Tests for where the logging configuration comes from."""

    @pytest.fixture
    def calls(self, monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, str]]:
        """Record every configure_logging call as (level, format)."""
        recorded: list[tuple[str, str]] = []

        def record(level: str = "INFO", log_format: str = "console") -> None:
            recorded.append((str(level).upper(), str(log_format).lower()))

        monkeypatch.setattr("roslyn_test_updater.utils.logging.configure_logging", record)
        return recorded

    def test_environment_settings_apply(
        self,
        workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
        calls: list[tuple[str, str]],
    ) -> None:
        """Test logging settings from the environment apply without a config file."""
        monkeypatch.setenv("ROSLYN_TEST_UPDATER_LOGGING__LEVEL", "WARNING")
        monkeypatch.setenv("ROSLYN_TEST_UPDATER_LOGGING__FORMAT", "json")
        log = write_log(workspace, workspace / "C.cs")

        assert main(["--input", str(log), "--no-playlist"]) == 0

        assert calls[-1] == ("WARNING", "json")

    def test_command_line_overrides_environment(
        self,
        workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
        calls: list[tuple[str, str]],
    ) -> None:
        """Test --debug and --format win over configured settings."""
        monkeypatch.setenv("ROSLYN_TEST_UPDATER_LOGGING__LEVEL", "WARNING")
        monkeypatch.setenv("ROSLYN_TEST_UPDATER_LOGGING__FORMAT", "json")
        log = write_log(workspace, workspace / "C.cs")

        assert main(["--input", str(log), "--no-playlist", "-d", "--format", "console"]) == 0

        assert calls[-1] == ("DEBUG", "console")
