"""
Observed cluster state dataclasses.

`RemoteTableDescriptor` captures what exists on the cluster *right now* for one table:
its name, whether it is enabled, and its column families as reported by the admin
client. Families use the same `ColumnFamilySpec` type as the desired model so the
differ can compare them attribute by attribute.

Notes:
- Dataclasses are frozen; the family mapping is exposed read-only.
- Admin client implementations build these; the engine only builds one itself when
  it needs a descriptor for a create call.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Self

from src.hbase_engine.models import ColumnFamilySpec


@dataclass(frozen=True, slots=True)
class RemoteTableDescriptor:
    """Observed table: name, enabled flag and column families keyed by name."""

    name: str
    column_families: Mapping[str, ColumnFamilySpec] = field(
        default_factory=lambda: MappingProxyType({})
    )
    enabled: bool = True

    @classmethod
    def from_families(
        cls,
        name: str,
        families: Iterable[ColumnFamilySpec],
        enabled: bool = True,
    ) -> Self:
        """Build a descriptor from an iterable of families."""
        by_name = {family.name: family for family in families}
        return cls(name=name, column_families=MappingProxyType(by_name), enabled=enabled)

    @property
    def family_names(self) -> tuple[str, ...]:
        """Family names, sorted for deterministic output."""
        return tuple(sorted(self.column_families))

    def family(self, name: str) -> ColumnFamilySpec | None:
        """Return the family called `name`, or None."""
        return self.column_families.get(name)
