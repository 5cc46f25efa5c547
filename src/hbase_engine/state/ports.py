"""Port for talking to the cluster's admin API.

Implementations:
- adapters.in_memory_client.InMemoryAdminClient (programmable catalog, for tests and dry runs)
- adapters.rest_client.RestAdminClient (HBase REST gateway)

Every method is synchronous. Failures raise `RemoteCommunicationError` when the cluster
cannot be reached and `ClusterOperationError` when it rejects the request.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.hbase_engine.models import ColumnFamilySpec
from src.hbase_engine.state.states import RemoteTableDescriptor


class ClusterAdminClient(Protocol):
    """Admin operations the engine needs from a cluster."""

    def list_tables(self) -> Sequence[RemoteTableDescriptor]: ...

    def create_table(self, descriptor: RemoteTableDescriptor) -> None: ...

    def disable_table(self, table_name: str) -> None: ...

    def enable_table(self, table_name: str) -> None: ...

    def add_column_family(self, table_name: str, family: ColumnFamilySpec) -> None: ...

    def modify_column_family(self, table_name: str, family: ColumnFamilySpec) -> None: ...

    def delete_column_family(self, table_name: str, family_name: str) -> None: ...
