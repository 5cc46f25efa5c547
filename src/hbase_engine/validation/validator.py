"""
Validator core: run model rules and diff rules for one table.

Responsibilities
----------------
- Keep rules decoupled via simple Protocols (each rule receives only what it needs).
- Perform no I/O.
- `ensure_valid` turns ERROR findings into a SchemaInconsistencyError so the reconciler
  can stop a table before touching the cluster.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from src.hbase_engine.errors import SchemaInconsistencyError
from src.hbase_engine.models import TableSchema
from src.hbase_engine.plan.diffs import TableDiff
from src.hbase_engine.validation.diagnostics import Diagnostic, ValidationReport
from src.hbase_engine.validation.rules import default_rule_set

# ---------- rule protocols ----------


class ModelRule(Protocol):
    """A rule over the desired table only; returns zero or more diagnostics."""

    code: str

    def check(self, desired: TableSchema) -> list[Diagnostic]: ...


class DiffRule(Protocol):
    """A rule over the desired table and the changes planned for it."""

    code: str

    def check(self, desired: TableSchema, diff: TableDiff) -> list[Diagnostic]: ...


# ---------- validator ----------


class Validator:
    """Runs the configured model and diff rules; performs no I/O."""

    def __init__(
        self,
        model_rules: Iterable[ModelRule] | None = None,
        diff_rules: Iterable[DiffRule] | None = None,
    ) -> None:
        default_model_rules, default_diff_rules = default_rule_set()
        self._model_rules = tuple(default_model_rules if model_rules is None else model_rules)
        self._diff_rules = tuple(default_diff_rules if diff_rules is None else diff_rules)

    def validate_model(self, desired: TableSchema) -> ValidationReport:
        diagnostics: list[Diagnostic] = []
        for rule in self._model_rules:
            diagnostics.extend(rule.check(desired))
        return ValidationReport(diagnostics=tuple(diagnostics))

    def validate_diff(self, desired: TableSchema, diff: TableDiff) -> ValidationReport:
        diagnostics: list[Diagnostic] = []
        for rule in self._diff_rules:
            diagnostics.extend(rule.check(desired, diff))
        return ValidationReport(diagnostics=tuple(diagnostics))

    def ensure_valid(self, desired: TableSchema) -> ValidationReport:
        """Validate the model; raise SchemaInconsistencyError if any ERROR was found."""
        report = self.validate_model(desired)
        if not report.ok:
            raise SchemaInconsistencyError(desired.name, report.errors)
        return report
