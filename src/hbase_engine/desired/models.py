"""
Desired schema models.

These dataclasses define the *intended* state handed to the engine, plus the
named configurations a schema document groups them into.

Conventions
-----------
- `DesiredSchema.tables`: tables to reconcile, in the order outcomes are reported.
- `ClusterConnection`: how to reach the cluster. The engine never reads it; it is
  consumed by whoever builds the admin client.
- `SchemaDocument.select(name)`:
    None          → first configuration
    known name    → that configuration (case-insensitive)
    unknown name  → first configuration, with a warning
"""

from __future__ import annotations

from dataclasses import dataclass

from src.hbase_engine.errors import SchemaDocumentError
from src.hbase_engine.models import TableSchema
from src.logger import LOGGER


@dataclass(frozen=True)
class DesiredSchema:
    """A set of desired tables to manage."""

    tables: tuple[TableSchema, ...]

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(table.name for table in self.tables)


@dataclass(frozen=True)
class ClusterConnection:
    """Connection parameters for one cluster."""

    rest_url: str | None = None
    hbase_master: str | None = None
    zookeeper_quorum: str | None = None
    zookeeper_client_port: int | None = None


@dataclass(frozen=True)
class SchemaConfiguration:
    """One named configuration: a cluster plus the tables it should carry."""

    name: str
    connection: ClusterConnection
    schema: DesiredSchema
    description: str = ""


@dataclass(frozen=True)
class SchemaDocument:
    """All configurations read from one schema document."""

    configurations: tuple[SchemaConfiguration, ...]

    def select(self, name: str | None = None) -> SchemaConfiguration:
        """Pick a configuration by name; see module docstring for the fallback rules."""
        if not self.configurations:
            raise SchemaDocumentError("Schema document contains no configurations")

        default = self.configurations[0]
        if name is None:
            return default

        for configuration in self.configurations:
            if configuration.name.lower() == name.lower():
                return configuration

        LOGGER.warning(
            "Configuration '%s' not found; using default configuration '%s'.", name, default.name
        )
        return default
