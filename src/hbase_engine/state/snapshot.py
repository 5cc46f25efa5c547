"""
Remote snapshot: a lazily loaded, explicitly refreshed cache of the cluster's tables.

Listing tables is a full catalog scan on the cluster, so the snapshot fetches once and
answers every later `exists` / `lookup` from memory until a caller forces a refresh.
A failed fetch leaves the previous cache untouched.
"""

from __future__ import annotations

from collections.abc import Mapping

from src.hbase_engine.errors import RemoteCommunicationError
from src.hbase_engine.state.ports import ClusterAdminClient
from src.hbase_engine.state.states import RemoteTableDescriptor
from src.logger import LOGGER


class RemoteSnapshot:
    """Cache of `table name -> RemoteTableDescriptor`, owned by a single reconciliation run."""

    def __init__(self, client: ClusterAdminClient) -> None:
        self._client = client
        self._tables: Mapping[str, RemoteTableDescriptor] | None = None
        self.fetch_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._tables is not None

    def list_tables(self, force_refresh: bool = False) -> tuple[RemoteTableDescriptor, ...]:
        """Return all remote tables, fetching only when forced or not yet loaded."""
        return tuple(self._load(force_refresh).values())

    def exists(self, table_name: str) -> bool:
        """True if the cluster has a table called `table_name`."""
        return table_name in self._load(force_refresh=False)

    def lookup(self, table_name: str) -> RemoteTableDescriptor | None:
        """Return the descriptor for `table_name`, or None if the cluster has no such table."""
        return self._load(force_refresh=False).get(table_name)

    def invalidate(self) -> None:
        """Drop the cache; the next access fetches again."""
        self._tables = None

    # ---------- helpers ----------

    def _load(self, force_refresh: bool) -> Mapping[str, RemoteTableDescriptor]:
        if self._tables is not None and not force_refresh:
            return self._tables

        try:
            descriptors = tuple(self._client.list_tables())
        except RemoteCommunicationError:
            raise
        except Exception as error:
            raise RemoteCommunicationError(
                f"Failed to list tables: {type(error).__name__}: {error}"
            ) from error

        self._tables = {descriptor.name: descriptor for descriptor in descriptors}
        self.fetch_count += 1
        LOGGER.debug("Remote snapshot loaded: %d table(s).", len(self._tables))
        return self._tables
