"""
Diagnostics primitives shared by the validator and rules.

- DiagnosticLevel: error/warning/info
- Diagnostic: a single validation finding
- ValidationReport: an immutable bag of diagnostics with a convenience .ok flag

Notes
-----
- `table_name` is the table the finding is about.
- `family_name` is "" for table-level findings.
- Codes are UPPER_SNAKE_CASE with full words, e.g., "BLOCK_SIZE_POSITIVE".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class DiagnosticLevel(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single validation finding."""

    table_name: str
    level: DiagnosticLevel
    code: str
    message: str
    family_name: str = ""


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Immutable bag of diagnostics with a convenience 'ok' property."""

    diagnostics: tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        return not any(d.level == DiagnosticLevel.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.level == DiagnosticLevel.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.level == DiagnosticLevel.WARNING)
