"""Pydantic models for configuration schema."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarkersConfig(BaseModel):
    """Line markers recognised in the test runner's console output."""

    failed_test: str = " [FAIL]"
    expected: str = "Expected:"
    actual: str = "Actual:"
    diff: str = "Diff:"
    stack_trace: str = "Stack Trace:"
    run_started: str | None = "Starting test execution, please wait..."
    line_prefix: str | None = "[xUnit.net"

    @field_validator("failed_test", "expected", "actual", "diff", "stack_trace")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Reject markers that would match every line."""
        if not v.strip():
            raise ValueError("Marker must not be blank")
        return v


class LocatorConfig(BaseModel):
    """Heuristics used to find the expected block in a test source file."""

    clues: list[str] = Field(
        default_factory=lambda: [".VerifyDiagnostics(", ".VerifyEmitDiagnostics(", ".Verify("],
        min_length=1,
    )
    indent_unit: str = "    "
    verify_expected: bool = True

    @field_validator("clues")
    @classmethod
    def validate_clues(cls, v: list[str]) -> list[str]:
        """Clues must end at the call's opening parenthesis."""
        for clue in v:
            if not clue.endswith("("):
                raise ValueError(f"Clue must end with '(': {clue!r}")
        return v

    @field_validator("indent_unit")
    @classmethod
    def validate_indent_unit(cls, v: str) -> str:
        """Validate the indentation unit is non-empty whitespace."""
        if not v or v.strip():
            raise ValueError("Indentation unit must be non-empty whitespace")
        return v


class OutputConfig(BaseModel):
    """What the updater writes at the end of a run."""

    playlist_enabled: bool = True
    playlist_name: str = "RoslynTestUpdater.playlist"
    encoding: str = "utf-8-sig"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"


class UpdaterConfig(BaseSettings):
    """Root configuration for the Roslyn test updater."""

    markers: MarkersConfig = Field(default_factory=MarkersConfig)
    locator: LocatorConfig = Field(default_factory=LocatorConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="ROSLYN_TEST_UPDATER_",
        env_nested_delimiter="__",
    )
