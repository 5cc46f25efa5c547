"""
Concrete validation rules.

- Centralised RuleCode (StrEnum)
- Model rules look at a desired table only
- Diff rules look at a desired table and the changes computed for it
- `default_rule_set()` returns (model_rules, diff_rules)
"""

from __future__ import annotations

import re
from enum import StrEnum

from src import constants
from src.hbase_engine.models import ColumnFamilySpec, TableSchema
from src.hbase_engine.plan.diffs import TableDiff
from src.hbase_engine.validation.diagnostics import Diagnostic, DiagnosticLevel

# namespace:qualifier, both parts limited to what HBase accepts in table names
_TABLE_NAME_PATTERN = re.compile(r"^(?:[A-Za-z0-9_]+:)?[A-Za-z0-9_][A-Za-z0-9_.-]*$")


class RuleCode(StrEnum):
    """Stable identifiers for every rule, used as the diagnostic code."""

    TABLE_NAME_VALID = "TABLE_NAME_VALID"
    TABLE_HAS_COLUMN_FAMILIES = "TABLE_HAS_COLUMN_FAMILIES"
    FAMILY_NAME_VALID = "FAMILY_NAME_VALID"
    FAMILY_KEY_MATCHES_NAME = "FAMILY_KEY_MATCHES_NAME"
    FAMILY_ATTRIBUTES_IN_RANGE = "FAMILY_ATTRIBUTES_IN_RANGE"
    MAX_VERSIONS_POSITIVE = "MAX_VERSIONS_POSITIVE"
    BLOCK_SIZE_POSITIVE = "BLOCK_SIZE_POSITIVE"
    TIME_TO_LIVE_POSITIVE = "TIME_TO_LIVE_POSITIVE"
    REPLICATION_SCOPE_NOT_NEGATIVE = "REPLICATION_SCOPE_NOT_NEGATIVE"
    IN_MEMORY_REQUIRES_BLOCK_CACHE = "IN_MEMORY_REQUIRES_BLOCK_CACHE"
    FAMILY_DELETION_DROPS_DATA = "FAMILY_DELETION_DROPS_DATA"


# ---------- MODEL RULES (desired only) ----------


class TableNameMustBeValid:
    """Table names must be non-empty and use only characters HBase accepts."""

    code = RuleCode.TABLE_NAME_VALID.value

    def check(self, desired: TableSchema) -> list[Diagnostic]:
        if desired.name and _TABLE_NAME_PATTERN.match(desired.name):
            return []
        return [
            Diagnostic(
                table_name=desired.name,
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=f"Table name '{desired.name}' is empty or contains invalid characters",
            )
        ]


class TableShouldHaveColumnFamilies:
    """A table without families is legal in the model but cannot hold any data."""

    code = RuleCode.TABLE_HAS_COLUMN_FAMILIES.value

    def check(self, desired: TableSchema) -> list[Diagnostic]:
        if desired.column_families:
            return []
        return [
            Diagnostic(
                table_name=desired.name,
                level=DiagnosticLevel.WARNING,
                code=self.code,
                message=f"Table '{desired.name}' declares no column families",
            )
        ]


class FamilyNamesMustBeValid:
    """Family names must be non-empty, free of the qualifier separator, and match their key."""

    code = RuleCode.FAMILY_NAME_VALID.value

    def check(self, desired: TableSchema) -> list[Diagnostic]:
        findings: list[Diagnostic] = []
        for key, family in desired.column_families.items():
            if key != family.name:
                findings.append(
                    _family_error(
                        desired,
                        family,
                        RuleCode.FAMILY_KEY_MATCHES_NAME.value,
                        f"Column family registered as '{key}' is named '{family.name}'",
                    )
                )
            if not family.name or constants.FAMILY_NAME_SEPARATOR in family.name:
                findings.append(
                    _family_error(
                        desired,
                        family,
                        self.code,
                        f"Column family name '{family.name}' is empty or contains "
                        f"'{constants.FAMILY_NAME_SEPARATOR}'",
                    )
                )
        return findings


class FamilyAttributesMustBeInRange:
    """Numeric attributes, when set, must be positive (replication scope: not negative)."""

    code = RuleCode.FAMILY_ATTRIBUTES_IN_RANGE.value

    def check(self, desired: TableSchema) -> list[Diagnostic]:
        findings: list[Diagnostic] = []
        for family in desired.column_families.values():
            positive_checks = (
                (family.max_versions, RuleCode.MAX_VERSIONS_POSITIVE, "max_versions"),
                (family.block_size, RuleCode.BLOCK_SIZE_POSITIVE, "block_size"),
                (family.time_to_live, RuleCode.TIME_TO_LIVE_POSITIVE, "time_to_live"),
            )
            for value, code, label in positive_checks:
                if value is not None and value <= 0:
                    findings.append(
                        _family_error(
                            desired,
                            family,
                            code.value,
                            f"{label} must be positive, got {value}",
                        )
                    )
            if family.replication_scope is not None and family.replication_scope < 0:
                findings.append(
                    _family_error(
                        desired,
                        family,
                        RuleCode.REPLICATION_SCOPE_NOT_NEGATIVE.value,
                        f"replication_scope must not be negative, got {family.replication_scope}",
                    )
                )
        return findings


class InMemoryRequiresBlockCache:
    """In-memory priority lives in the block cache, so it cannot be combined with a disabled cache."""

    code = RuleCode.IN_MEMORY_REQUIRES_BLOCK_CACHE.value

    def check(self, desired: TableSchema) -> list[Diagnostic]:
        return [
            _family_error(
                desired,
                family,
                self.code,
                "in_memory=true requires block_cache_enabled to be true",
            )
            for family in desired.column_families.values()
            if family.in_memory is True and family.block_cache_enabled is False
        ]


# ---------- DIFF RULES (desired + computed changes) ----------


class FamilyDeletionDropsData:
    """Deleting a family removes all of its cells; surface it before the change is applied."""

    code = RuleCode.FAMILY_DELETION_DROPS_DATA.value

    def check(self, desired: TableSchema, diff: TableDiff) -> list[Diagnostic]:
        return [
            Diagnostic(
                table_name=desired.name,
                level=DiagnosticLevel.WARNING,
                code=self.code,
                message=f"Column family '{name}' is not declared and will be deleted with its data",
                family_name=name,
            )
            for name in diff.to_delete
        ]


# ---------- factory ----------


def default_rule_set() -> tuple[tuple, tuple]:
    """Return the rules the engine runs when none are injected."""
    model_rules = (
        TableNameMustBeValid(),
        TableShouldHaveColumnFamilies(),
        FamilyNamesMustBeValid(),
        FamilyAttributesMustBeInRange(),
        InMemoryRequiresBlockCache(),
    )
    diff_rules = (FamilyDeletionDropsData(),)
    return model_rules, diff_rules


def _family_error(
    desired: TableSchema, family: ColumnFamilySpec, code: str, message: str
) -> Diagnostic:
    return Diagnostic(
        table_name=desired.name,
        level=DiagnosticLevel.ERROR,
        code=code,
        message=f"{desired.name}.{family.name}: {message}",
        family_name=family.name,
    )
