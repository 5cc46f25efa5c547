"""Domain models for declaring HBase tables (column families + their storage settings)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from src import constants
from src.enums import BloomFilterType, Compression


@dataclass(frozen=True, slots=True)
class ColumnFamilySpec:
    """
    Declarative column family definition.

    Every storage attribute is optional; None means "use the cluster default".
    `description` is informational and does not take part in equality.
    """

    name: str
    max_versions: int | None = None
    compression: Compression | None = None
    in_memory: bool | None = None
    block_cache_enabled: bool | None = None
    block_size: int | None = None
    time_to_live: int | None = None
    bloom_filter: BloomFilterType | None = None
    replication_scope: int | None = None
    description: str = field(default="", compare=False)

    def resolved(self) -> ColumnFamilySpec:
        """Return a copy with every unset attribute replaced by the cluster default."""
        return replace(
            self,
            max_versions=_or_default(self.max_versions, constants.DEFAULT_MAX_VERSIONS),
            compression=_or_default(self.compression, constants.DEFAULT_COMPRESSION),
            in_memory=_or_default(self.in_memory, constants.DEFAULT_IN_MEMORY),
            block_cache_enabled=_or_default(
                self.block_cache_enabled, constants.DEFAULT_BLOCK_CACHE_ENABLED
            ),
            block_size=_or_default(self.block_size, constants.DEFAULT_BLOCK_SIZE),
            time_to_live=_or_default(self.time_to_live, constants.DEFAULT_TIME_TO_LIVE),
            bloom_filter=_or_default(self.bloom_filter, constants.DEFAULT_BLOOM_FILTER),
            replication_scope=_or_default(
                self.replication_scope, constants.DEFAULT_REPLICATION_SCOPE
            ),
        )

    def matches(self, other: ColumnFamilySpec) -> bool:
        """True if both specs describe the same family once cluster defaults are applied."""
        return self.resolved() == other.resolved()


@dataclass(frozen=True)
class TableSchema:
    """Declarative HBase table definition."""

    name: str
    column_families: Mapping[str, ColumnFamilySpec] = field(
        default_factory=lambda: MappingProxyType({})
    )
    description: str = ""

    @classmethod
    def of(
        cls,
        name: str,
        families: Iterable[ColumnFamilySpec],
        description: str = "",
    ) -> TableSchema:
        """Build a table from an iterable of families; a repeated family name keeps the last one."""
        by_name = {family.name: family for family in families}
        return cls(name=name, column_families=MappingProxyType(by_name), description=description)

    # --------- Convenience properties ---------

    @property
    def family_names(self) -> tuple[str, ...]:
        """Family names, sorted for deterministic output."""
        return tuple(sorted(self.column_families))

    def family(self, name: str) -> ColumnFamilySpec | None:
        """Return the family called `name`, or None."""
        return self.column_families.get(name)


def _or_default(value, default):
    return default if value is None else value
