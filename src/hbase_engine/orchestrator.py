"""
End-to-end orchestration for the HBase engine.

Flow (one run):
  1) Check the desired tables are uniquely named.
  2) Open a fresh remote snapshot (loaded lazily on first lookup).
  3) Reconcile each table in the order supplied; a failed table does not stop the rest.
  4) Return one outcome per table.

Design goals:
- No cluster plumbing here: this file glues components together.
- Accepts dependencies via constructor for testability and decoupling.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from src.hbase_engine.desired.models import DesiredSchema
from src.hbase_engine.errors import SchemaInconsistencyError
from src.hbase_engine.events import EventSink
from src.hbase_engine.execute.ports import OutcomeStatus, ReconciliationOutcome, RunMode
from src.hbase_engine.execute.reconciler import TableReconciler
from src.hbase_engine.models import TableSchema
from src.hbase_engine.plan.differ import Differ
from src.hbase_engine.state.ports import ClusterAdminClient
from src.hbase_engine.state.snapshot import RemoteSnapshot
from src.hbase_engine.state.states import RemoteTableDescriptor
from src.hbase_engine.validation.diagnostics import Diagnostic, DiagnosticLevel
from src.hbase_engine.validation.validator import Validator
from src.logger import LOGGER


class Orchestrator:
    """
    Glue for snapshot → per-table reconcile → outcomes.

    This class does not talk to the cluster itself; it delegates to injected components.
    """

    def __init__(
        self,
        client: ClusterAdminClient,
        differ: Differ,
        validator: Validator,
        events: EventSink,
    ) -> None:
        self._client = client
        self._differ = differ
        self._validator = validator
        self._events = events

    # ----- public API -----

    def new_snapshot(self) -> RemoteSnapshot:
        """A fresh, not-yet-loaded snapshot bound to this orchestrator's client."""
        return RemoteSnapshot(self._client)

    def reconcile(
        self,
        tables: DesiredSchema | Iterable[TableSchema],
        mode: RunMode,
        snapshot: RemoteSnapshot | None = None,
    ) -> tuple[ReconciliationOutcome, ...]:
        """Reconcile every table; outcomes come back in the order the tables were given."""
        desired_tables = tables.tables if isinstance(tables, DesiredSchema) else tuple(tables)
        _ensure_unique_names(desired_tables)

        LOGGER.info(
            "Starting reconciliation for %d table(s) (list_only=%s, create_or_modify=%s).",
            len(desired_tables),
            mode.list_only,
            mode.allow_create_or_modify,
        )
        reconciler = TableReconciler(
            client=self._client,
            snapshot=snapshot or self.new_snapshot(),
            events=self._events,
            mode=mode,
            differ=self._differ,
            validator=self._validator,
        )
        outcomes = tuple(reconciler.reconcile(table) for table in desired_tables)

        LOGGER.info("Reconciliation completed: %s", _summarise(outcomes))
        return outcomes

    def list_remote_tables(
        self, snapshot: RemoteSnapshot | None = None
    ) -> tuple[RemoteTableDescriptor, ...]:
        """Every table currently on the cluster, always read fresh."""
        active = snapshot or self.new_snapshot()
        return active.list_tables(force_refresh=True)


# ---------- tiny helpers ----------


def _ensure_unique_names(tables: tuple[TableSchema, ...]) -> None:
    counts = Counter(table.name for table in tables)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if not duplicates:
        return
    diagnostics = [
        Diagnostic(
            table_name=name,
            level=DiagnosticLevel.ERROR,
            code="TABLE_NAME_UNIQUE",
            message=f"Table '{name}' is declared {counts[name]} times",
        )
        for name in duplicates
    ]
    raise SchemaInconsistencyError(", ".join(duplicates), diagnostics)


def _summarise(outcomes: tuple[ReconciliationOutcome, ...]) -> str:
    counts = Counter(outcome.status for outcome in outcomes)
    parts = [f"{status.value}={counts[status]}" for status in OutcomeStatus if counts[status]]
    return ", ".join(parts) or "no tables"
