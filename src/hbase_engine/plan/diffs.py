"""
Diff result types: what has to change for one table.

- `exists=False` means the table is absent remotely; its families belong to a future
  create and are not classified as add/modify/delete.
- `to_modify` carries the observed family (`old`) and its desired replacement (`new`).
- `to_delete` holds plain family names.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.hbase_engine.models import ColumnFamilySpec


@dataclass(frozen=True, slots=True)
class FamilyModification:
    """A family present on both sides whose attributes differ."""

    old: ColumnFamilySpec
    new: ColumnFamilySpec

    @property
    def name(self) -> str:
        return self.new.name


@dataclass(frozen=True, slots=True)
class TableDiff:
    """Column family changes needed to move one remote table to its desired state."""

    table_name: str
    exists: bool
    to_add: tuple[ColumnFamilySpec, ...] = ()
    to_modify: tuple[FamilyModification, ...] = ()
    to_delete: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when an existing table already matches: nothing to add, modify or delete."""
        return not (self.to_add or self.to_modify or self.to_delete)

    @property
    def change_count(self) -> int:
        return len(self.to_add) + len(self.to_modify) + len(self.to_delete)

    def summary(self) -> str:
        """One-line 'add=N, modify=N, delete=N' rendering for logs."""
        return (
            f"add={len(self.to_add)}, "
            f"modify={len(self.to_modify)}, "
            f"delete={len(self.to_delete)}"
        )
