"""
Loader: YAML schema document → SchemaDocument

Document shape
--------------
configurations:
  - name: local
    description: ...
    connection:
      rest_url: http://localhost:8080
      hbase_master: localhost:60000
      zookeeper_quorum: localhost
      zookeeper_client_port: 2181
    tables:
      - name: users
        description: ...
        column_families:
          - name: info
            max_versions: 3
            compression: gz
            in_memory: false
            block_cache_enabled: true
            block_size: 65536
            time_to_live: 86400
            bloom_filter: row
            replication_scope: 0

Absent or empty attribute values are left unset (cluster default). Values are checked
for type only here; range and combination checks belong to the validator.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml

from src.enums import BloomFilterType, Compression
from src.hbase_engine.desired.models import (
    ClusterConnection,
    DesiredSchema,
    SchemaConfiguration,
    SchemaDocument,
)
from src.hbase_engine.errors import SchemaDocumentError
from src.hbase_engine.models import ColumnFamilySpec, TableSchema
from src.logger import LOGGER

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


# ---------- public loaders ----------


def load_schema_document(path: str | Path) -> SchemaDocument:
    """Read and parse the schema document at `path`."""
    document_path = Path(path)
    try:
        with document_path.open("r") as f:
            raw = yaml.safe_load(f)
    except OSError as error:
        raise SchemaDocumentError(f"Cannot read schema document '{document_path}': {error}") from error
    except yaml.YAMLError as error:
        raise SchemaDocumentError(f"Invalid YAML in '{document_path}': {error}") from error

    LOGGER.debug("Schema document read from %s", document_path)
    return parse_schema_document(raw)


def parse_schema_document(raw: Any) -> SchemaDocument:
    """Convert an already-loaded YAML structure into a SchemaDocument."""
    if not isinstance(raw, Mapping):
        raise SchemaDocumentError("Schema document must be a mapping with a 'configurations' key")

    entries = raw.get("configurations")
    if not isinstance(entries, list) or not entries:
        raise SchemaDocumentError("Schema document must define at least one configuration")

    configurations = tuple(_parse_configuration(entry, index) for index, entry in enumerate(entries))
    return SchemaDocument(configurations=configurations)


# ---------- section parsers ----------


def _parse_configuration(entry: Any, index: int) -> SchemaConfiguration:
    where = f"configurations[{index}]"
    conf = _require_mapping(entry, where)
    name = _optional_str(conf.get("name"), f"{where}.name") or f"configuration-{index}"

    tables_raw = conf.get("tables") or []
    if not isinstance(tables_raw, list):
        raise SchemaDocumentError(f"{where}.tables must be a list")

    tables = tuple(
        _parse_table(table, f"{where}.tables[{t}]") for t, table in enumerate(tables_raw)
    )
    return SchemaConfiguration(
        name=name,
        connection=_parse_connection(conf.get("connection") or {}, f"{where}.connection"),
        schema=DesiredSchema(tables=tables),
        description=_optional_str(conf.get("description"), f"{where}.description") or "",
    )


def _parse_connection(entry: Any, where: str) -> ClusterConnection:
    conf = _require_mapping(entry, where)
    return ClusterConnection(
        rest_url=_optional_str(conf.get("rest_url"), f"{where}.rest_url"),
        hbase_master=_optional_str(conf.get("hbase_master"), f"{where}.hbase_master"),
        zookeeper_quorum=_optional_str(conf.get("zookeeper_quorum"), f"{where}.zookeeper_quorum"),
        zookeeper_client_port=_optional_int(
            conf.get("zookeeper_client_port"), f"{where}.zookeeper_client_port"
        ),
    )


def _parse_table(entry: Any, where: str) -> TableSchema:
    conf = _require_mapping(entry, where)
    name = _required_str(conf.get("name"), f"{where}.name")

    families_raw = conf.get("column_families") or []
    if not isinstance(families_raw, list):
        raise SchemaDocumentError(f"{where}.column_families must be a list")

    families = [
        _parse_family(family, f"{where}.column_families[{c}]")
        for c, family in enumerate(families_raw)
    ]
    seen: set[str] = set()
    for family in families:
        if family.name in seen:
            LOGGER.warning(
                "Table '%s' declares column family '%s' more than once; the last one wins.",
                name,
                family.name,
            )
        seen.add(family.name)

    return TableSchema.of(
        name=name,
        families=families,
        description=_optional_str(conf.get("description"), f"{where}.description") or "",
    )


def _parse_family(entry: Any, where: str) -> ColumnFamilySpec:
    conf = _require_mapping(entry, where)
    return ColumnFamilySpec(
        name=_required_str(conf.get("name"), f"{where}.name"),
        max_versions=_optional_int(conf.get("max_versions"), f"{where}.max_versions"),
        compression=_optional_enum(Compression, conf.get("compression"), f"{where}.compression"),
        in_memory=_optional_bool(conf.get("in_memory"), f"{where}.in_memory"),
        block_cache_enabled=_optional_bool(
            conf.get("block_cache_enabled"), f"{where}.block_cache_enabled"
        ),
        block_size=_optional_int(conf.get("block_size"), f"{where}.block_size"),
        time_to_live=_optional_int(conf.get("time_to_live"), f"{where}.time_to_live"),
        bloom_filter=_optional_enum(
            BloomFilterType, conf.get("bloom_filter"), f"{where}.bloom_filter"
        ),
        replication_scope=_optional_int(
            conf.get("replication_scope"), f"{where}.replication_scope"
        ),
        description=_optional_str(conf.get("description"), f"{where}.description") or "",
    )


# ---------- tiny value helpers ----------


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaDocumentError(f"{where} must be a mapping")
    return value


def _required_str(value: Any, where: str) -> str:
    text = _optional_str(value, where)
    if text is None:
        raise SchemaDocumentError(f"{where} is required")
    return text


def _optional_str(value: Any, where: str) -> str | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise SchemaDocumentError(f"{where} must be a string, got {value!r}")
    return str(value).strip()


def _optional_int(value: Any, where: str) -> int | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise SchemaDocumentError(f"{where} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as error:
        raise SchemaDocumentError(f"{where} must be an integer, got {value!r}") from error


def _optional_bool(value: Any, where: str) -> bool | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise SchemaDocumentError(f"{where} must be true or false, got {value!r}")


def _optional_enum(enum_type: type[StrEnum], value: Any, where: str):
    if _is_blank(value):
        return None
    try:
        return enum_type(str(value).strip().upper())
    except ValueError as error:
        allowed = ", ".join(member.value for member in enum_type)
        raise SchemaDocumentError(
            f"{where} must be one of {allowed}, got {value!r}"
        ) from error
