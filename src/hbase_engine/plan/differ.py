"""
Diff engine: desired table + observed table -> TableDiff.

Principles
----------
- No side effects; this module only computes what should change.
- Families are identified by name only. A renamed family shows up as one delete plus
  one add.
- Families present on both sides are compared attribute by attribute after cluster
  defaults are applied, so a family left at defaults in the document matches a cluster
  that reports those defaults explicitly.
- Output is sorted by family name for reproducible runs.
"""

from __future__ import annotations

from src.hbase_engine.models import ColumnFamilySpec, TableSchema
from src.hbase_engine.plan.diffs import FamilyModification, TableDiff
from src.hbase_engine.state.states import RemoteTableDescriptor


class Differ:
    """
    Compute the column family changes between a desired table and its remote counterpart.

    Workflow
    --------
    1. Remote table missing → `TableDiff(exists=False)`; nothing is classified.
    2. Otherwise partition families by name:
         both sides, attributes differ → modify
         desired only                  → add
         remote only                   → delete
         both sides, attributes equal  → left out
    """

    def diff(self, desired: TableSchema, remote: RemoteTableDescriptor | None) -> TableDiff:
        if remote is None:
            return TableDiff(table_name=desired.name, exists=False)

        return TableDiff(
            table_name=desired.name,
            exists=True,
            to_add=_families_to_add(desired, remote),
            to_modify=_families_to_modify(desired, remote),
            to_delete=_families_to_delete(desired, remote),
        )


def build_table_descriptor(desired: TableSchema) -> RemoteTableDescriptor:
    """Descriptor for creating `desired` from scratch, with cluster defaults filled in."""
    return RemoteTableDescriptor.from_families(
        name=desired.name,
        families=(desired.column_families[name].resolved() for name in desired.family_names),
    )


# ---------- partition helpers ----------


def _families_to_add(
    desired: TableSchema, remote: RemoteTableDescriptor
) -> tuple[ColumnFamilySpec, ...]:
    return tuple(
        desired.column_families[name]
        for name in desired.family_names
        if remote.family(name) is None
    )


def _families_to_modify(
    desired: TableSchema, remote: RemoteTableDescriptor
) -> tuple[FamilyModification, ...]:
    changes: list[FamilyModification] = []
    for name in desired.family_names:
        observed = remote.family(name)
        if observed is None:
            continue
        wanted = desired.column_families[name]
        if not wanted.matches(observed):
            changes.append(FamilyModification(old=observed, new=wanted))
    return tuple(changes)


def _families_to_delete(desired: TableSchema, remote: RemoteTableDescriptor) -> tuple[str, ...]:
    return tuple(name for name in remote.family_names if desired.family(name) is None)
