import pytest

from src.enums import Compression
from src.hbase_engine.events import RecordingEventSink
from src.hbase_engine.models import ColumnFamilySpec, TableSchema
from src.hbase_engine.state.adapters.in_memory_client import InMemoryAdminClient
from src.hbase_engine.state.states import RemoteTableDescriptor


@pytest.fixture
def users_desired() -> TableSchema:
    """`users` wants info at 3 versions plus a gz-compressed stats family."""
    return TableSchema.of(
        "users",
        [
            ColumnFamilySpec(name="info", max_versions=3),
            ColumnFamilySpec(name="stats", compression=Compression.GZ),
        ],
    )


@pytest.fixture
def users_remote() -> RemoteTableDescriptor:
    """`users` as found on the cluster: info at 1 version and a leftover legacy family."""
    return RemoteTableDescriptor.from_families(
        "users",
        [
            ColumnFamilySpec(name="info", max_versions=1).resolved(),
            ColumnFamilySpec(name="legacy").resolved(),
        ],
    )


@pytest.fixture
def events_desired() -> TableSchema:
    return TableSchema.of("events", [ColumnFamilySpec(name="data", max_versions=2)])


@pytest.fixture
def events_remote() -> RemoteTableDescriptor:
    return RemoteTableDescriptor.from_families(
        "events", [ColumnFamilySpec(name="data", max_versions=2).resolved()]
    )


@pytest.fixture
def audit_desired() -> TableSchema:
    return TableSchema.of("audit", [ColumnFamilySpec(name="entries")])


@pytest.fixture
def cluster(users_remote, events_remote) -> InMemoryAdminClient:
    return InMemoryAdminClient([users_remote, events_remote])


@pytest.fixture
def recorder() -> RecordingEventSink:
    return RecordingEventSink()
