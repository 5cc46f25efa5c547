"""
ClusterAdminClient backed by the HBase REST gateway (Stargate).

Endpoints used (JSON bodies):
- GET  /                  → {"table": [{"name": ...}, ...]}
- GET  /{table}/schema    → {"name": ..., "ColumnSchema": [{"name": ..., "VERSIONS": ...}, ...]}
- PUT  /{table}/schema    → create a table, or replace its full schema
- POST /{table}/schema    → add or modify the column families in the body

Notes:
- The gateway disables and re-enables the table around every schema change itself, so
  `disable_table` / `enable_table` have nothing to send and only log.
- Deleting a family is a PUT of the current schema without that family.
- The schema endpoint does not report the enabled flag; tables are read as enabled.
- Transport failures raise RemoteCommunicationError; error statuses raise
  ClusterOperationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from src import constants, settings
from src.enums import BloomFilterType, Compression
from src.hbase_engine.errors import ClusterOperationError, RemoteCommunicationError
from src.hbase_engine.models import ColumnFamilySpec
from src.hbase_engine.state.states import RemoteTableDescriptor
from src.logger import LOGGER

_JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}

# Gateway spelling of "no expiry".
_TTL_FOREVER = "FOREVER"


class RestAdminClient:
    """Admin client talking to `base_url` (falls back to HBASE_REST_URL)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=base_url or settings.HBASE_REST_URL,
            timeout=timeout if timeout is not None else settings.HBASE_REST_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self._client.close()

    # ---------- ClusterAdminClient ----------

    def list_tables(self) -> tuple[RemoteTableDescriptor, ...]:
        listing = self._get_json("/")
        names = [entry["name"] for entry in listing.get("table") or []]
        LOGGER.debug("REST gateway lists %d table(s).", len(names))
        return tuple(self._read_table(name) for name in names)

    def create_table(self, descriptor: RemoteTableDescriptor) -> None:
        families = [descriptor.column_families[name] for name in descriptor.family_names]
        self._send("PUT", _schema_path(descriptor.name), _table_to_json(descriptor.name, families))

    def disable_table(self, table_name: str) -> None:
        LOGGER.debug("REST gateway disables '%s' per schema change; nothing to send.", table_name)

    def enable_table(self, table_name: str) -> None:
        LOGGER.debug("REST gateway enables '%s' per schema change; nothing to send.", table_name)

    def add_column_family(self, table_name: str, family: ColumnFamilySpec) -> None:
        self._send("POST", _schema_path(table_name), _table_to_json(table_name, [family]))

    def modify_column_family(self, table_name: str, family: ColumnFamilySpec) -> None:
        self._send("POST", _schema_path(table_name), _table_to_json(table_name, [family]))

    def delete_column_family(self, table_name: str, family_name: str) -> None:
        current = self._read_table(table_name)
        if family_name not in current.column_families:
            raise ClusterOperationError(
                f"Column family '{family_name}' does not exist in table '{table_name}'"
            )
        remaining = [
            current.column_families[name] for name in current.family_names if name != family_name
        ]
        self._send("PUT", _schema_path(table_name), _table_to_json(table_name, remaining))

    # ---------- HTTP plumbing ----------

    def _read_table(self, table_name: str) -> RemoteTableDescriptor:
        schema = self._get_json(_schema_path(table_name))
        families = [_family_from_json(table_name, raw) for raw in schema.get("ColumnSchema") or []]
        return RemoteTableDescriptor.from_families(table_name, families)

    def _get_json(self, path: str) -> Mapping[str, Any]:
        response = self._request("GET", path)
        try:
            payload = response.json()
        except ValueError as error:
            raise RemoteCommunicationError(f"GET {path} returned invalid JSON: {error}") from error
        if not isinstance(payload, Mapping):
            raise RemoteCommunicationError(f"GET {path} returned an unexpected payload")
        return payload

    def _send(self, method: str, path: str, body: Mapping[str, Any]) -> None:
        LOGGER.debug("%s %s", method, path)
        self._request(method, path, body)

    def _request(
        self, method: str, path: str, body: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        try:
            response = self._client.request(method, path, json=body, headers=_JSON_HEADERS)
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            status = error.response.status_code
            text = error.response.text.strip()
            raise ClusterOperationError(f"{method} {path} returned {status}: {text}") from error
        except httpx.TransportError as error:
            raise RemoteCommunicationError(
                f"{method} {path} failed: {type(error).__name__}: {error}"
            ) from error
        return response


# ---------- JSON mapping ----------


def _schema_path(table_name: str) -> str:
    return f"/{table_name}/schema"


def _table_to_json(table_name: str, families: list[ColumnFamilySpec]) -> dict[str, Any]:
    return {"name": table_name, "ColumnSchema": [_family_to_json(family) for family in families]}


def _family_to_json(family: ColumnFamilySpec) -> dict[str, str]:
    resolved = family.resolved()
    return {
        "name": resolved.name,
        "VERSIONS": str(resolved.max_versions),
        "COMPRESSION": str(resolved.compression),
        "IN_MEMORY": _flag(resolved.in_memory),
        "BLOCKCACHE": _flag(resolved.block_cache_enabled),
        "BLOCKSIZE": str(resolved.block_size),
        "TTL": str(resolved.time_to_live),
        "BLOOMFILTER": str(resolved.bloom_filter),
        "REPLICATION_SCOPE": str(resolved.replication_scope),
    }


def _family_from_json(table_name: str, raw: Mapping[str, Any]) -> ColumnFamilySpec:
    try:
        return ColumnFamilySpec(
            name=str(raw["name"]),
            max_versions=_int(raw.get("VERSIONS")),
            compression=_enum(Compression, raw.get("COMPRESSION")),
            in_memory=_bool(raw.get("IN_MEMORY")),
            block_cache_enabled=_bool(raw.get("BLOCKCACHE")),
            block_size=_int(raw.get("BLOCKSIZE")),
            time_to_live=_ttl(raw.get("TTL")),
            bloom_filter=_enum(BloomFilterType, raw.get("BLOOMFILTER")),
            replication_scope=_int(raw.get("REPLICATION_SCOPE")),
        )
    except (KeyError, ValueError) as error:
        raise RemoteCommunicationError(
            f"Unreadable column family in schema of '{table_name}': {error}"
        ) from error


def _flag(value: bool | None) -> str:
    return "true" if value else "false"


def _int(value: Any) -> int | None:
    return None if value is None else int(value)


def _bool(value: Any) -> bool | None:
    return None if value is None else str(value).strip().lower() == "true"


def _ttl(value: Any) -> int | None:
    if value is not None and str(value).strip().upper() == _TTL_FOREVER:
        return constants.DEFAULT_TIME_TO_LIVE
    return _int(value)


def _enum(enum_type, value: Any):
    return None if value is None else enum_type(str(value).strip().upper())
