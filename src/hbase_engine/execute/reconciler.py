"""
TableReconciler

Drives one desired table through an explicit state machine:

  INSPECTING → UP_TO_DATE                                   (terminal, UNCHANGED)
             → NEEDS_CREATE → DONE                          (CREATED / SKIPPED_NO_CREATE)
             → NEEDS_UPDATE → DISABLING → MUTATING → ENABLING → DONE   (UPDATED)
  any phase  → FAILED                                       (terminal, FAILED)

Column families can only be changed on a disabled table. Once DISABLING succeeds the
run either reaches ENABLING or stops with the table left disabled; there is no
rollback. Re-running recomputes the diff against whatever was applied and finishes
the job: a table found disabled is not disabled again, and one that only missed its
enable goes straight to ENABLING. That resume path needs a client that reports the
enabled flag; the REST gateway adapter reads every table as enabled and wraps each
schema change in its own disable/enable, so through it a table is never seen disabled.

The shared snapshot is reloaded after a create or an enable, and dropped when a phase
that writes to the cluster fails, so a later run on the same snapshot reads fresh state.

Within MUTATING, modifications run first, then additions, then deletions.

List-only runs skip the machine: they look the table up and report PRESENT or ABSENT.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType

from src.hbase_engine.errors import RemoteCommunicationError
from src.hbase_engine.events import EventKind, EventSink, ReconciliationEvent
from src.hbase_engine.execute.ports import OutcomeStatus, Phase, ReconciliationOutcome, RunMode
from src.hbase_engine.models import TableSchema
from src.hbase_engine.plan.differ import Differ, build_table_descriptor
from src.hbase_engine.plan.diffs import TableDiff
from src.hbase_engine.state.ports import ClusterAdminClient
from src.hbase_engine.state.snapshot import RemoteSnapshot
from src.hbase_engine.state.states import RemoteTableDescriptor
from src.hbase_engine.validation.diagnostics import ValidationReport
from src.hbase_engine.validation.validator import Validator


TERMINAL_PHASES = frozenset({Phase.UP_TO_DATE, Phase.DONE, Phase.FAILED})
WRITE_PHASES = frozenset({Phase.NEEDS_CREATE, Phase.DISABLING, Phase.MUTATING, Phase.ENABLING})


@dataclass
class _TableRun:
    """Mutable working state for one table; never shared across tables."""

    desired: TableSchema
    remote: RemoteTableDescriptor | None = None
    diff: TableDiff | None = None
    status: OutcomeStatus | None = None
    reason: str = ""
    completed: list[str] = field(default_factory=list)
    disabled: bool = False
    phases: list[Phase] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.desired.name


class TableReconciler:
    """Reconcile desired tables one at a time against a shared snapshot."""

    def __init__(
        self,
        client: ClusterAdminClient,
        snapshot: RemoteSnapshot,
        events: EventSink,
        mode: RunMode,
        differ: Differ | None = None,
        validator: Validator | None = None,
    ) -> None:
        self._client = client
        self._snapshot = snapshot
        self._events = events
        self._mode = mode
        self._differ = differ or Differ()
        self._validator = validator or Validator()
        self._handlers: dict[Phase, Callable[[_TableRun], Phase]] = {
            Phase.INSPECTING: self._inspect,
            Phase.NEEDS_CREATE: self._create,
            Phase.NEEDS_UPDATE: self._begin_update,
            Phase.DISABLING: self._disable,
            Phase.MUTATING: self._mutate,
            Phase.ENABLING: self._enable,
        }

    # ---------- public API ----------

    def reconcile(self, desired: TableSchema) -> ReconciliationOutcome:
        """Run the state machine for `desired` and return its outcome."""
        self._emit(EventKind.TABLE_STARTED, desired.name, f"Processing table {desired.name}")

        if self._mode.list_only:
            outcome = self._list_only(desired)
        else:
            outcome = self._run_machine(_TableRun(desired=desired))

        self._emit(
            EventKind.OUTCOME,
            outcome.table_name,
            _outcome_message(outcome),
            status=outcome.status.value,
        )
        return outcome

    # ---------- machine ----------

    def _run_machine(self, run: _TableRun) -> ReconciliationOutcome:
        phase = Phase.INSPECTING
        while phase not in TERMINAL_PHASES:
            run.phases.append(phase)
            try:
                phase = self._handlers[phase](run)
            except Exception as error:
                run.status = OutcomeStatus.FAILED
                run.reason = _failure_reason(phase, error, run)
                if phase in WRITE_PHASES:
                    self._snapshot.invalidate()
                phase = Phase.FAILED
        run.phases.append(phase)

        return ReconciliationOutcome(
            table_name=run.name,
            status=run.status or OutcomeStatus.FAILED,
            reason=run.reason,
            diff=run.diff,
            completed_mutations=tuple(run.completed),
            table_left_disabled=run.disabled,
            phases=tuple(run.phases),
        )

    def _list_only(self, desired: TableSchema) -> ReconciliationOutcome:
        exists = self._snapshot.exists(desired.name)
        return ReconciliationOutcome(
            table_name=desired.name,
            status=OutcomeStatus.PRESENT if exists else OutcomeStatus.ABSENT,
        )

    # ---------- phase handlers ----------

    def _inspect(self, run: _TableRun) -> Phase:
        self._report_findings(self._validator.ensure_valid(run.desired))

        run.remote = self._snapshot.lookup(run.name)
        run.diff = self._differ.diff(run.desired, run.remote)
        if not run.diff.exists:
            self._emit(EventKind.DIFF_COMPUTED, run.name, "Table does not exist", exists=False)
            return Phase.NEEDS_CREATE

        self._report_diff(run.diff)
        left_disabled = not run.remote.enabled
        if run.diff.is_empty and not left_disabled:
            run.status = OutcomeStatus.UNCHANGED
            return Phase.UP_TO_DATE

        if not self._mode.allow_create_or_modify:
            run.status = OutcomeStatus.SKIPPED_NO_CREATE
            run.reason = (
                "Table is disabled and modification is not permitted"
                if run.diff.is_empty
                else "Table differs from its schema and modification is not permitted"
            )
            return Phase.DONE

        if run.diff.is_empty:
            run.disabled = True
            return Phase.ENABLING

        self._report_findings(self._validator.validate_diff(run.desired, run.diff))
        return Phase.NEEDS_UPDATE

    def _create(self, run: _TableRun) -> Phase:
        if not self._mode.allow_create_or_modify:
            run.status = OutcomeStatus.SKIPPED_NO_CREATE
            run.reason = "Table does not exist and creation is not permitted"
            return Phase.DONE

        descriptor = build_table_descriptor(run.desired)
        self._emit(
            EventKind.TABLE_CREATING,
            run.name,
            f"Creating table {run.name} with {len(descriptor.column_families)} column family(ies)",
        )
        self._client.create_table(descriptor)
        run.completed.append(f"create table {run.name}")
        self._emit(EventKind.TABLE_CREATED, run.name, "Table created")
        self._refresh_snapshot(run)

        run.status = OutcomeStatus.CREATED
        return Phase.DONE

    def _begin_update(self, run: _TableRun) -> Phase:
        return Phase.DISABLING

    def _disable(self, run: _TableRun) -> Phase:
        if run.remote is not None and not run.remote.enabled:
            run.disabled = True
            self._emit(EventKind.TABLE_DISABLED, run.name, "Table already disabled")
            return Phase.MUTATING

        self._emit(EventKind.TABLE_DISABLING, run.name, "Disabling table")
        self._client.disable_table(run.name)
        run.disabled = True
        run.completed.append(f"disable table {run.name}")
        self._emit(EventKind.TABLE_DISABLED, run.name, "Table disabled")
        return Phase.MUTATING

    def _mutate(self, run: _TableRun) -> Phase:
        diff = run.diff
        if diff is None:
            raise RuntimeError(f"No diff computed for table {run.name}")

        for modification in diff.to_modify:
            self._client.modify_column_family(run.name, modification.new.resolved())
            run.completed.append(f"modify column family {modification.name}")
        for family in diff.to_add:
            self._client.add_column_family(run.name, family.resolved())
            run.completed.append(f"add column family {family.name}")
        for family_name in diff.to_delete:
            self._client.delete_column_family(run.name, family_name)
            run.completed.append(f"delete column family {family_name}")
        return Phase.ENABLING

    def _enable(self, run: _TableRun) -> Phase:
        self._emit(EventKind.TABLE_ENABLING, run.name, "Enabling table")
        self._client.enable_table(run.name)
        run.disabled = False
        run.completed.append(f"enable table {run.name}")
        self._emit(EventKind.TABLE_ENABLED, run.name, "Table enabled")

        self._refresh_snapshot(run)
        run.status = OutcomeStatus.UPDATED
        return Phase.DONE

    # ---------- helpers ----------

    def _refresh_snapshot(self, run: _TableRun) -> None:
        """Reload remote state after a change; a failed reload only costs the cache."""
        try:
            self._snapshot.list_tables(force_refresh=True)
        except RemoteCommunicationError as error:
            self._snapshot.invalidate()
            self._emit(
                EventKind.SNAPSHOT_REFRESH_FAILED,
                run.name,
                f"Could not reload table list after change: {error}",
            )

    def _report_diff(self, diff: TableDiff) -> None:
        self._emit(
            EventKind.DIFF_COMPUTED,
            diff.table_name,
            "No changes detected" if diff.is_empty else f"Changes detected: {diff.summary()}",
            exists=True,
            add=len(diff.to_add),
            modify=len(diff.to_modify),
            delete=len(diff.to_delete),
        )
        if not self._mode.verbose:
            return
        for modification in diff.to_modify:
            self._emit_family_change(
                diff.table_name,
                "modify",
                modification.name,
                f"Found different column family {modification.old} -> {modification.new}",
            )
        for family in diff.to_add:
            self._emit_family_change(
                diff.table_name, "add", family.name, f"Found new column family {family}"
            )
        for family_name in diff.to_delete:
            self._emit_family_change(
                diff.table_name, "delete", family_name, f"Found removed column family {family_name}"
            )

    def _emit_family_change(
        self, table_name: str, change: str, family_name: str, message: str
    ) -> None:
        self._emit(
            EventKind.FAMILY_CHANGE,
            table_name,
            message,
            diagnostic=True,
            change=change,
            family=family_name,
        )

    def _report_findings(self, report: ValidationReport) -> None:
        for finding in report.diagnostics:
            self._emit(
                EventKind.VALIDATION_FINDING,
                finding.table_name,
                finding.message,
                code=finding.code,
                level=finding.level.value,
            )

    def _emit(
        self,
        kind: EventKind,
        table_name: str,
        message: str,
        diagnostic: bool = False,
        **details: object,
    ) -> None:
        self._events.emit(
            ReconciliationEvent(
                kind=kind,
                table_name=table_name,
                message=message,
                details=MappingProxyType(details),
                diagnostic=diagnostic,
            )
        )


# ---------- tiny helpers ----------


def _failure_reason(phase: Phase, error: Exception, run: _TableRun) -> str:
    reason = f"Failed while {phase.activity}: {type(error).__name__}: {error}"
    if run.disabled:
        done = ", ".join(run.completed) or "nothing"
        reason += f" (table left disabled; completed: {done})"
    return reason


def _outcome_message(outcome: ReconciliationOutcome) -> str:
    text = f"Outcome: {outcome.status.value}"
    return f"{text} ({outcome.reason})" if outcome.reason else text
