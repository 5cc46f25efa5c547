"""
Structured progress events emitted while reconciling tables.

The engine never prints; it hands `ReconciliationEvent`s to an `EventSink`.

- LoggingEventSink: renders each event through the project logger
- RecordingEventSink: keeps events in memory (tests, callers that build their own report)

Events flagged `diagnostic=True` are only emitted in verbose runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Protocol

from src.logger import LOGGER


class EventKind(StrEnum):
    TABLE_STARTED = "table_started"
    VALIDATION_FINDING = "validation_finding"
    DIFF_COMPUTED = "diff_computed"
    FAMILY_CHANGE = "family_change"
    TABLE_CREATING = "table_creating"
    TABLE_CREATED = "table_created"
    TABLE_DISABLING = "table_disabling"
    TABLE_DISABLED = "table_disabled"
    TABLE_ENABLING = "table_enabling"
    TABLE_ENABLED = "table_enabled"
    SNAPSHOT_REFRESH_FAILED = "snapshot_refresh_failed"
    OUTCOME = "outcome"


@dataclass(frozen=True, slots=True)
class ReconciliationEvent:
    """One progress step for one table."""

    kind: EventKind
    table_name: str
    message: str
    details: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    diagnostic: bool = False


class EventSink(Protocol):
    """Receives events in the order they happen."""

    def emit(self, event: ReconciliationEvent) -> None: ...


class RecordingEventSink:
    """Keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[ReconciliationEvent] = []

    def emit(self, event: ReconciliationEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[EventKind]:
        return [event.kind for event in self.events]


class LoggingEventSink:
    """Renders events as log lines: diagnostics at DEBUG, problems at WARNING/ERROR."""

    _LEVELS: Mapping[EventKind, int] = MappingProxyType(
        {
            EventKind.VALIDATION_FINDING: logging.WARNING,
            EventKind.SNAPSHOT_REFRESH_FAILED: logging.WARNING,
        }
    )

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def emit(self, event: ReconciliationEvent) -> None:
        level = self._level_for(event)
        self._logger.log(level, "[%s] %s", event.table_name, event.message)

    def _level_for(self, event: ReconciliationEvent) -> int:
        if event.diagnostic:
            return logging.DEBUG
        if event.kind is EventKind.OUTCOME and event.details.get("status") == "failed":
            return logging.ERROR
        return self._LEVELS.get(event.kind, logging.INFO)
