"""
Execution inputs and result types.

- RunMode: toggles passed in by the CLI (list-only, create/modify permission, verbosity)
- OutcomeStatus / ReconciliationOutcome: per-table result handed back to the caller
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.hbase_engine.plan.diffs import TableDiff


class Phase(StrEnum):
    """States of the per-table reconciliation machine."""

    INSPECTING = "inspecting"
    UP_TO_DATE = "up_to_date"
    NEEDS_CREATE = "needs_create"
    NEEDS_UPDATE = "needs_update"
    DISABLING = "disabling"
    MUTATING = "mutating"
    ENABLING = "enabling"
    DONE = "done"
    FAILED = "failed"

    @property
    def activity(self) -> str:
        """What the engine is doing while in this phase, for failure messages."""
        mapping = {
            Phase.INSPECTING: "inspecting table",
            Phase.NEEDS_CREATE: "creating table",
            Phase.NEEDS_UPDATE: "preparing update",
            Phase.DISABLING: "disabling table",
            Phase.MUTATING: "changing column families",
            Phase.ENABLING: "enabling table",
        }
        return mapping.get(self, self.value)


class OutcomeStatus(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED_NO_CREATE = "skipped_no_create"  # creation/modification not permitted
    FAILED = "failed"
    PRESENT = "present"  # list-only: table exists remotely
    ABSENT = "absent"  # list-only: table missing remotely


@dataclass(frozen=True)
class RunMode:
    """
    Controls what a run may do.

    list_only:
        Only look tables up; never create, disable or mutate.
    allow_create_or_modify:
        False reports missing or drifted tables without touching them.
    verbose:
        Emit per-family diagnostic events. Never changes behaviour.
    """

    list_only: bool = False
    allow_create_or_modify: bool = True
    verbose: bool = False


@dataclass(frozen=True)
class ReconciliationOutcome:
    """
    Result for one table.

    completed_mutations:
        Human-readable steps that reached the cluster, in order. On a failure after the
        table was disabled this tells an operator exactly how far the run got.
    table_left_disabled:
        True when a failure happened between disable and enable.
    phases:
        States the table went through, ending with the terminal one.
    """

    table_name: str
    status: OutcomeStatus
    reason: str = ""
    diff: TableDiff | None = None
    completed_mutations: tuple[str, ...] = ()
    table_left_disabled: bool = False
    phases: tuple[Phase, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED
