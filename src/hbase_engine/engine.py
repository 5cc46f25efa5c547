"""
Engine: high-level entry point for the HBase engine.

Responsibilities
----------------
- Wire default components (differ, validator, event sink) around a cluster admin client.
- Expose the public API:
    - reconcile(tables, mode)
    - list_remote_tables()

Notes:
-----
- No cluster calls here; work is delegated to the orchestrator and the injected client.
- Defaults are provided, but everything can be overridden for testing or custom behaviour.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.hbase_engine.desired.models import DesiredSchema
from src.hbase_engine.events import EventSink, LoggingEventSink
from src.hbase_engine.execute.ports import ReconciliationOutcome, RunMode
from src.hbase_engine.models import TableSchema
from src.hbase_engine.orchestrator import Orchestrator
from src.hbase_engine.plan.differ import Differ
from src.hbase_engine.state.ports import ClusterAdminClient
from src.hbase_engine.state.snapshot import RemoteSnapshot
from src.hbase_engine.state.states import RemoteTableDescriptor
from src.hbase_engine.validation.validator import Validator


class Engine:
    """
    High-level entry point for the HBase engine.

    You can:
      - pass your own components (for custom behaviour), or
      - rely on defaults (simple, batteries included).
    """

    def __init__(
        self,
        client: ClusterAdminClient,
        differ: Differ | None = None,
        validator: Validator | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.client = client

        # Wire defaults if not supplied
        self.differ = differ or Differ()
        self.validator = validator or Validator()
        self.events = events or LoggingEventSink()

        # Orchestrator (glue)
        self.orchestrator = Orchestrator(
            client=self.client,
            differ=self.differ,
            validator=self.validator,
            events=self.events,
        )

    def reconcile(
        self,
        tables: DesiredSchema | Iterable[TableSchema],
        mode: RunMode | None = None,
        snapshot: RemoteSnapshot | None = None,
    ) -> tuple[ReconciliationOutcome, ...]:
        """Reconcile `tables` against the cluster; one outcome per table, in input order."""
        return self.orchestrator.reconcile(tables, mode or RunMode(), snapshot=snapshot)

    def list_remote_tables(
        self, snapshot: RemoteSnapshot | None = None
    ) -> tuple[RemoteTableDescriptor, ...]:
        return self.orchestrator.list_remote_tables(snapshot)

    def new_snapshot(self) -> RemoteSnapshot:
        return self.orchestrator.new_snapshot()
