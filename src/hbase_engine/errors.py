"""
Error taxonomy for the HBase engine.

- AdminClientError and its subclasses are raised by ClusterAdminClient implementations.
  The reconciler treats any of them as fatal for the table being processed.
- SchemaInconsistencyError is raised before any remote mutation when a desired table
  carries invalid attribute values or combinations.
- SchemaDocumentError is raised by the document loader for unreadable or malformed input.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.hbase_engine.validation.diagnostics import Diagnostic


class HBaseManagerError(Exception):
    """Base class for all errors raised by the HBase table manager."""


class AdminClientError(HBaseManagerError):
    """A call through the cluster admin client failed."""


class RemoteCommunicationError(AdminClientError):
    """Transport or availability failure while talking to the cluster."""


class ClusterOperationError(AdminClientError):
    """The cluster received the request but rejected it."""


class SchemaInconsistencyError(HBaseManagerError):
    """A desired table schema carries invalid attribute values or combinations."""

    def __init__(self, table_name: str, diagnostics: Sequence[Diagnostic] = ()) -> None:
        self.table_name = table_name
        self.diagnostics = tuple(diagnostics)
        details = "; ".join(d.message for d in self.diagnostics)
        message = f"Invalid schema for table '{table_name}'"
        super().__init__(f"{message}: {details}" if details else message)


class SchemaDocumentError(HBaseManagerError):
    """The declarative schema document could not be read or is malformed."""
