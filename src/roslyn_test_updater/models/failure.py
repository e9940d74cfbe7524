"""Data models for failed tests extracted from test output."""

from dataclasses import dataclass
from typing import NamedTuple


class FailedTestId(NamedTuple):
    """Identity of a test method, used to skip repeated failures."""

    namespace: str
    class_name: str
    method_name: str

    def __str__(self) -> str:
        return ".".join(part for part in self if part)


@dataclass(frozen=True)
class SourceLocation:
    """Where a failing assertion was called from in the test source."""

    file_path: str
    line: int  # 1-based
    column: int
    namespace: str
    class_name: str
    method_name: str

    def __str__(self) -> str:
        return f"{self.file_path}({self.line},{self.column})"

    @property
    def test_id(self) -> FailedTestId:
        """The (namespace, class, method) triple of the test."""
        return FailedTestId(self.namespace, self.class_name, self.method_name)

    @property
    def qualified_class_name(self) -> str:
        """Class name including its namespace, as test runners expect it."""
        if not self.namespace:
            return self.class_name
        return f"{self.namespace}.{self.class_name}"

    @property
    def qualified_name(self) -> str:
        """Fully qualified method name."""
        return f"{self.qualified_class_name}.{self.method_name}"


@dataclass(frozen=True)
class ParsingResult:
    """One failed diagnostics assertion found in the test output."""

    expected_lines: tuple[str, ...] | None  # None when the log has no Expected block
    actual_text: str
    source: SourceLocation

    @property
    def expects_nothing(self) -> bool:
        """True when the test currently asserts that there are no diagnostics."""
        if self.expected_lines is None:
            return False
        return not any(
            line.strip() and not line.lstrip().startswith("//") for line in self.expected_lines
        )

    @property
    def actual_is_empty(self) -> bool:
        """True when the test run reported no diagnostics at all."""
        return not self.actual_text.strip()
