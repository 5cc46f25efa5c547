import textwrap

import pytest

from src.enums import BloomFilterType, Compression
from src.hbase_engine.desired.loader import load_schema_document, parse_schema_document
from src.hbase_engine.errors import SchemaDocumentError
from src.hbase_engine.models import ColumnFamilySpec

DOCUMENT = textwrap.dedent(
    """
    configurations:
      - name: local
        description: Local single-node cluster
        connection:
          rest_url: http://localhost:8080
          hbase_master: localhost:60000
          zookeeper_quorum: localhost
          zookeeper_client_port: 2181
        tables:
          - name: users
            description: User profiles
            column_families:
              - name: info
                max_versions: 3
                compression: gz
                in_memory: "yes"
                block_cache_enabled: true
                block_size: "131072"
                time_to_live: 86400
                bloom_filter: rowcol
                replication_scope: 1
                description: profile data
              - name: stats
      - name: production
        connection:
          rest_url: http://hbase-rest.internal:8080
        tables:
          - name: audit
            column_families:
              - name: entries
    """
)


# ---------- happy path ----------


def test_load_reads_all_configurations(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(DOCUMENT)

    document = load_schema_document(path)

    assert [c.name for c in document.configurations] == ["local", "production"]
    local = document.configurations[0]
    assert local.description == "Local single-node cluster"
    assert local.connection.rest_url == "http://localhost:8080"
    assert local.connection.hbase_master == "localhost:60000"
    assert local.connection.zookeeper_client_port == 2181
    assert local.schema.table_names == ("users",)


def test_family_attributes_are_typed(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(DOCUMENT)

    users = load_schema_document(path).configurations[0].schema.tables[0]
    info = users.family("info")

    assert users.description == "User profiles"
    assert info == ColumnFamilySpec(
        name="info",
        max_versions=3,
        compression=Compression.GZ,
        in_memory=True,
        block_cache_enabled=True,
        block_size=131072,
        time_to_live=86400,
        bloom_filter=BloomFilterType.ROWCOL,
        replication_scope=1,
    )
    assert info.description == "profile data"


def test_absent_attributes_stay_unset():
    raw = {"configurations": [{"tables": [{"name": "t", "column_families": [{"name": "cf"}]}]}]}
    family = parse_schema_document(raw).configurations[0].schema.tables[0].family("cf")
    assert family == ColumnFamilySpec(name="cf")


def test_configuration_without_name_gets_positional_name():
    raw = {"configurations": [{"tables": []}]}
    assert parse_schema_document(raw).configurations[0].name == "configuration-0"


def test_duplicate_family_keeps_last_and_warns(monkeypatch):
    import src.hbase_engine.desired.loader as loader_mod

    warnings = []
    monkeypatch.setattr(
        loader_mod.LOGGER, "warning", lambda msg, *args: warnings.append(msg % args)
    )
    raw = {
        "configurations": [
            {
                "tables": [
                    {
                        "name": "t",
                        "column_families": [
                            {"name": "cf", "max_versions": 1},
                            {"name": "cf", "max_versions": 5},
                        ],
                    }
                ]
            }
        ]
    }
    table = parse_schema_document(raw).configurations[0].schema.tables[0]
    assert table.family("cf").max_versions == 5
    assert any("more than once" in w for w in warnings)


# ---------- errors ----------


def test_missing_file_raises_document_error(tmp_path):
    with pytest.raises(SchemaDocumentError, match="Cannot read"):
        load_schema_document(tmp_path / "missing.yaml")


def test_invalid_yaml_raises_document_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("configurations: [unclosed\n")
    with pytest.raises(SchemaDocumentError, match="Invalid YAML"):
        load_schema_document(path)


@pytest.mark.parametrize(
    "raw",
    [None, [], {"configurations": []}, {"configurations": "nope"}],
)
def test_document_without_configurations_is_rejected(raw):
    with pytest.raises(SchemaDocumentError):
        parse_schema_document(raw)


@pytest.mark.parametrize(
    ("attribute", "value", "message"),
    [
        ("compression", "brotli", "must be one of"),
        ("bloom_filter", "columns", "must be one of"),
        ("max_versions", "three", "must be an integer"),
        ("max_versions", True, "must be an integer"),
        ("in_memory", "maybe", "must be true or false"),
    ],
)
def test_bad_family_values_are_rejected(attribute, value, message):
    raw = {
        "configurations": [
            {"tables": [{"name": "t", "column_families": [{"name": "cf", attribute: value}]}]}
        ]
    }
    with pytest.raises(SchemaDocumentError, match=message):
        parse_schema_document(raw)


def test_table_without_name_is_rejected():
    raw = {"configurations": [{"tables": [{"column_families": []}]}]}
    with pytest.raises(SchemaDocumentError, match=r"tables\[0\]\.name is required"):
        parse_schema_document(raw)
