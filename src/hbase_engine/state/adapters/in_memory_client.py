"""
In-memory ClusterAdminClient.

Holds a catalog of `RemoteTableDescriptor`s and applies admin calls to it the way a
cluster would:
- creating an existing table, or touching a missing table or family, is rejected
- column family changes need the table to be disabled first
- disabling a disabled table (or enabling an enabled one) is rejected

Every call is recorded in `calls`, including calls that fail. Failures can be
programmed per method with `fail_on`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from types import MappingProxyType

from src.hbase_engine.errors import ClusterOperationError
from src.hbase_engine.models import ColumnFamilySpec
from src.hbase_engine.state.states import RemoteTableDescriptor


@dataclass
class _ProgrammedFailure:
    error: Exception
    remaining: int
    argument: str | None


class InMemoryAdminClient:
    """Programmable fake cluster."""

    def __init__(self, tables: Iterable[RemoteTableDescriptor] = ()) -> None:
        self._tables: dict[str, RemoteTableDescriptor] = {table.name: table for table in tables}
        self._failures: dict[str, list[_ProgrammedFailure]] = {}
        self.calls: list[tuple[str, ...]] = []

    # ---------- programming ----------

    def fail_on(
        self,
        method: str,
        error: Exception,
        times: int = 1,
        argument: str | None = None,
    ) -> None:
        """
        Make the next `times` calls to `method` raise `error`.

        With `argument`, only calls naming that table or family fail.
        """
        self._failures.setdefault(method, []).append(
            _ProgrammedFailure(error=error, remaining=times, argument=argument)
        )

    def table(self, name: str) -> RemoteTableDescriptor | None:
        return self._tables.get(name)

    def mutation_calls(self) -> list[tuple[str, ...]]:
        """Recorded calls other than `list_tables`."""
        return [call for call in self.calls if call[0] != "list_tables"]

    # ---------- ClusterAdminClient ----------

    def list_tables(self) -> tuple[RemoteTableDescriptor, ...]:
        self._record("list_tables")
        return tuple(self._tables[name] for name in sorted(self._tables))

    def create_table(self, descriptor: RemoteTableDescriptor) -> None:
        self._record("create_table", descriptor.name)
        if descriptor.name in self._tables:
            raise ClusterOperationError(f"Table '{descriptor.name}' already exists")
        self._tables[descriptor.name] = replace(descriptor, enabled=True)

    def disable_table(self, table_name: str) -> None:
        self._record("disable_table", table_name)
        table = self._require_table(table_name)
        if not table.enabled:
            raise ClusterOperationError(f"Table '{table_name}' is already disabled")
        self._tables[table_name] = replace(table, enabled=False)

    def enable_table(self, table_name: str) -> None:
        self._record("enable_table", table_name)
        table = self._require_table(table_name)
        if table.enabled:
            raise ClusterOperationError(f"Table '{table_name}' is already enabled")
        self._tables[table_name] = replace(table, enabled=True)

    def add_column_family(self, table_name: str, family: ColumnFamilySpec) -> None:
        self._record("add_column_family", table_name, family.name)
        table = self._require_disabled(table_name)
        if family.name in table.column_families:
            raise ClusterOperationError(
                f"Column family '{family.name}' already exists in table '{table_name}'"
            )
        self._put_families(table, {**table.column_families, family.name: family})

    def modify_column_family(self, table_name: str, family: ColumnFamilySpec) -> None:
        self._record("modify_column_family", table_name, family.name)
        table = self._require_disabled(table_name)
        self._require_family(table, family.name)
        self._put_families(table, {**table.column_families, family.name: family})

    def delete_column_family(self, table_name: str, family_name: str) -> None:
        self._record("delete_column_family", table_name, family_name)
        table = self._require_disabled(table_name)
        self._require_family(table, family_name)
        remaining = {
            name: family for name, family in table.column_families.items() if name != family_name
        }
        self._put_families(table, remaining)

    # ---------- helpers ----------

    def _record(self, method: str, *arguments: str) -> None:
        self.calls.append((method, *arguments))
        for failure in self._failures.get(method, []):
            if failure.remaining <= 0:
                continue
            if failure.argument is not None and failure.argument not in arguments:
                continue
            failure.remaining -= 1
            raise failure.error

    def _require_table(self, table_name: str) -> RemoteTableDescriptor:
        table = self._tables.get(table_name)
        if table is None:
            raise ClusterOperationError(f"Table '{table_name}' does not exist")
        return table

    def _require_disabled(self, table_name: str) -> RemoteTableDescriptor:
        table = self._require_table(table_name)
        if table.enabled:
            raise ClusterOperationError(
                f"Table '{table_name}' must be disabled before changing column families"
            )
        return table

    def _require_family(self, table: RemoteTableDescriptor, family_name: str) -> None:
        if family_name not in table.column_families:
            raise ClusterOperationError(
                f"Column family '{family_name}' does not exist in table '{table.name}'"
            )

    def _put_families(
        self, table: RemoteTableDescriptor, families: dict[str, ColumnFamilySpec]
    ) -> None:
        self._tables[table.name] = replace(table, column_families=MappingProxyType(families))
