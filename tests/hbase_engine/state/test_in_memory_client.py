import pytest

from src.hbase_engine.errors import ClusterOperationError, RemoteCommunicationError
from src.hbase_engine.models import ColumnFamilySpec
from src.hbase_engine.state.adapters.in_memory_client import InMemoryAdminClient
from src.hbase_engine.state.states import RemoteTableDescriptor


# ---------- catalog ----------


def test_list_tables_is_sorted_and_recorded():
    client = InMemoryAdminClient(
        [RemoteTableDescriptor(name="users"), RemoteTableDescriptor(name="audit")]
    )
    assert [t.name for t in client.list_tables()] == ["audit", "users"]
    assert client.calls == [("list_tables",)]
    assert client.mutation_calls() == []


def test_create_table_stores_enabled_descriptor():
    client = InMemoryAdminClient()
    descriptor = RemoteTableDescriptor.from_families(
        "audit", [ColumnFamilySpec(name="entries")], enabled=False
    )
    client.create_table(descriptor)

    stored = client.table("audit")
    assert stored.enabled is True
    assert stored.family_names == ("entries",)


def test_create_existing_table_is_rejected(cluster):
    with pytest.raises(ClusterOperationError, match="already exists"):
        cluster.create_table(RemoteTableDescriptor(name="users"))


# ---------- disable / enable ----------


def test_disable_then_enable_round_trip(cluster):
    cluster.disable_table("users")
    assert cluster.table("users").enabled is False
    cluster.enable_table("users")
    assert cluster.table("users").enabled is True


def test_disable_twice_is_rejected(cluster):
    cluster.disable_table("users")
    with pytest.raises(ClusterOperationError, match="already disabled"):
        cluster.disable_table("users")


def test_enable_enabled_table_is_rejected(cluster):
    with pytest.raises(ClusterOperationError, match="already enabled"):
        cluster.enable_table("users")


def test_missing_table_is_rejected():
    with pytest.raises(ClusterOperationError, match="does not exist"):
        InMemoryAdminClient().disable_table("ghost")


# ---------- column families ----------


def test_family_changes_need_disabled_table(cluster):
    with pytest.raises(ClusterOperationError, match="must be disabled"):
        cluster.add_column_family("users", ColumnFamilySpec(name="stats"))


def test_add_modify_delete_on_disabled_table(cluster):
    cluster.disable_table("users")

    cluster.add_column_family("users", ColumnFamilySpec(name="stats"))
    cluster.modify_column_family("users", ColumnFamilySpec(name="info", max_versions=3))
    cluster.delete_column_family("users", "legacy")

    table = cluster.table("users")
    assert table.family_names == ("info", "stats")
    assert table.family("info").max_versions == 3


def test_add_existing_family_is_rejected(cluster):
    cluster.disable_table("users")
    with pytest.raises(ClusterOperationError, match="already exists"):
        cluster.add_column_family("users", ColumnFamilySpec(name="info"))


@pytest.mark.parametrize("method", ["modify_column_family", "delete_column_family"])
def test_missing_family_is_rejected(cluster, method):
    cluster.disable_table("users")
    argument = ColumnFamilySpec(name="ghost") if method == "modify_column_family" else "ghost"
    with pytest.raises(ClusterOperationError, match="does not exist"):
        getattr(cluster, method)("users", argument)


# ---------- programmed failures ----------


def test_fail_on_raises_requested_number_of_times(cluster):
    cluster.fail_on("list_tables", RemoteCommunicationError("down"), times=2)

    for _ in range(2):
        with pytest.raises(RemoteCommunicationError):
            cluster.list_tables()
    assert len(cluster.list_tables()) == 2
    assert cluster.calls.count(("list_tables",)) == 3


def test_fail_on_with_argument_only_hits_matching_calls(cluster):
    cluster.disable_table("users")
    cluster.fail_on("delete_column_family", ClusterOperationError("nope"), argument="legacy")

    cluster.add_column_family("users", ColumnFamilySpec(name="stats"))
    with pytest.raises(ClusterOperationError, match="nope"):
        cluster.delete_column_family("users", "legacy")
    assert cluster.table("users").family("legacy") is not None
    assert cluster.mutation_calls()[-1] == ("delete_column_family", "users", "legacy")
