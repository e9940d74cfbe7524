"""Shared test fixtures for the Roslyn test updater."""

from __future__ import annotations

import io
import logging
from pathlib import Path, PureWindowsPath

import pytest
import structlog

from roslyn_test_updater.config.schema import UpdaterConfig

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
LOGS_DIR = FIXTURES_DIR / "logs"
SNAPSHOTS_DIR = FIXTURES_DIR / "snapshots"


def read_exact(path: Path) -> str:
    """Read a text file without BOM and without newline translation."""
    return path.read_bytes().decode("utf-8-sig")


class _RecordingStream(io.StringIO):
    """Text stream that hands its contents to the file system when closed."""

    def __init__(self, fs: MemoryFileSystem, path: str) -> None:
        super().__init__()
        self._fs = fs
        self._path = path

    def close(self) -> None:
        if not self.closed:
            self._fs.created[self._path] = self.getvalue()
        super().close()


class MemoryFileSystem:
    """In-memory implementation of the FileSystem protocol."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.written: dict[str, str] = {}
        self.encodings: dict[str, str] = {}
        self.created: dict[str, str] = {}
        self.reads: list[str] = []

    def key(self, path: str) -> str:
        return path

    def read_text(self, path: str) -> str:
        self.reads.append(path)
        key = self.key(path)
        if key not in self.files:
            raise FileNotFoundError(f"No such file: {path}")
        return self.files[key]

    def write_text(self, path: str, contents: str, encoding: str) -> None:
        key = self.key(path)
        self.written[key] = contents
        self.encodings[key] = encoding

    def create_text(self, path: str) -> io.StringIO:
        return _RecordingStream(self, path)

    def get_full_path(self, path: str) -> str:
        return f"/work/{path}"


class SnapshotFileSystem(MemoryFileSystem):
    """Serves a snapshot directory for the Windows paths found in its test output."""

    def __init__(self, snapshot_dir: Path) -> None:
        super().__init__(
            {
                path.name: read_exact(path)
                for path in snapshot_dir.iterdir()
                if path.suffix == ".cs" and path.name != "expected.cs"
            }
        )

    def key(self, path: str) -> str:
        return PureWindowsPath(path).name


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration and bound context after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """Return an empty in-memory file system."""
    return MemoryFileSystem()


@pytest.fixture
def config() -> UpdaterConfig:
    """Return a default configuration unaffected by the environment."""
    return UpdaterConfig.model_validate({})


@pytest.fixture
def ref_field_log() -> str:
    """Load the log of a failed RefFieldTests run."""
    return read_exact(LOGS_DIR / "ref_field_tests.txt")


@pytest.fixture
def passing_log() -> str:
    """Load the log of a run without failures."""
    return read_exact(LOGS_DIR / "passing_run.txt")
