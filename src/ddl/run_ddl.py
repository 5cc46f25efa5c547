"""Entry point for reconciling the tables of a schema document against an HBase cluster."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from src import settings
from src.hbase_engine.desired.loader import load_schema_document
from src.hbase_engine.desired.models import SchemaConfiguration
from src.hbase_engine.engine import Engine
from src.hbase_engine.errors import (
    AdminClientError,
    SchemaDocumentError,
    SchemaInconsistencyError,
)
from src.hbase_engine.execute.ports import OutcomeStatus, RunMode
from src.hbase_engine.state.adapters.rest_client import RestAdminClient
from src.hbase_engine.state.ports import ClusterAdminClient
from src.logger import LOGGER, set_verbose

EXIT_OK = 0
EXIT_TABLE_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hbase-manager",
        description="Create or update HBase tables so they match a schema document.",
    )
    parser.add_argument("schema_file", help="YAML schema document")
    parser.add_argument(
        "config_name",
        nargs="?",
        default=None,
        help="configuration to apply (default: the first one in the document)",
    )
    parser.add_argument(
        "-l", "--list", action="store_true", help="list remote tables and exit without changes"
    )
    parser.add_argument(
        "-n",
        "--nocreate",
        action="store_true",
        help="report missing or different tables without creating or modifying them",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log every column family difference"
    )
    return parser


def run_ddl(
    configuration: SchemaConfiguration, client: ClusterAdminClient, mode: RunMode
) -> int:
    """Reconcile one configuration; returns the process exit status."""
    LOGGER.info(
        "Using configuration '%s' with %d table(s).",
        configuration.name,
        len(configuration.schema.tables),
    )
    engine = Engine(client)

    if mode.list_only:
        snapshot = engine.new_snapshot()
        remote_tables = engine.list_remote_tables(snapshot)
        print(f"Number of tables: {len(remote_tables)}")
        for table in remote_tables:
            print(f"  {table.name}")
        outcomes = engine.reconcile(configuration.schema, mode, snapshot=snapshot)
        for outcome in outcomes:
            print(f"Table {outcome.table_name} exists: {outcome.status is OutcomeStatus.PRESENT}")
    else:
        outcomes = engine.reconcile(configuration.schema, mode)

    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        LOGGER.error("Table '%s' failed: %s", outcome.table_name, outcome.reason)
    return EXIT_TABLE_FAILED if failed else EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    try:
        configuration = load_schema_document(args.schema_file).select(args.config_name)
    except SchemaDocumentError as error:
        LOGGER.error("%s", error)
        return EXIT_USAGE

    mode = RunMode(
        list_only=args.list,
        allow_create_or_modify=not args.nocreate,
        verbose=args.verbose,
    )
    client = RestAdminClient(base_url=configuration.connection.rest_url or settings.HBASE_REST_URL)
    try:
        return run_ddl(configuration, client, mode)
    except SchemaInconsistencyError as error:
        LOGGER.error("%s", error)
        return EXIT_USAGE
    except AdminClientError as error:
        LOGGER.error("%s: %s", type(error).__name__, error)
        return EXIT_TABLE_FAILED
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
