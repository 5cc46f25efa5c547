import pytest

from src.hbase_engine.errors import ClusterOperationError, RemoteCommunicationError
from src.hbase_engine.state.snapshot import RemoteSnapshot
from src.hbase_engine.state.states import RemoteTableDescriptor

# ---------- fakes ----------


class CountingClient:
    """Only implements list_tables; everything else is irrelevant to the snapshot."""

    def __init__(self, tables=(), error=None):
        self.tables = list(tables)
        self.error = error
        self.list_calls = 0

    def list_tables(self):
        self.list_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tables)


# ---------- tests ----------


def test_nothing_is_fetched_until_first_access():
    client = CountingClient([RemoteTableDescriptor(name="users")])
    snapshot = RemoteSnapshot(client)
    assert client.list_calls == 0
    assert snapshot.is_loaded is False


def test_two_exists_checks_fetch_once():
    client = CountingClient([RemoteTableDescriptor(name="users")])
    snapshot = RemoteSnapshot(client)

    assert snapshot.exists("users") is True
    assert snapshot.exists("audit") is False
    assert client.list_calls == 1
    assert snapshot.fetch_count == 1


def test_lookup_returns_descriptor_or_none():
    users = RemoteTableDescriptor(name="users")
    snapshot = RemoteSnapshot(CountingClient([users]))
    assert snapshot.lookup("users") is users
    assert snapshot.lookup("audit") is None


def test_forced_refresh_fetches_again_and_sees_new_tables():
    client = CountingClient([RemoteTableDescriptor(name="users")])
    snapshot = RemoteSnapshot(client)
    snapshot.list_tables()

    client.tables.append(RemoteTableDescriptor(name="audit"))
    assert snapshot.exists("audit") is False

    names = [t.name for t in snapshot.list_tables(force_refresh=True)]
    assert names == ["users", "audit"]
    assert client.list_calls == 2


def test_invalidate_drops_cache():
    client = CountingClient([RemoteTableDescriptor(name="users")])
    snapshot = RemoteSnapshot(client)
    snapshot.exists("users")

    snapshot.invalidate()
    assert snapshot.is_loaded is False
    snapshot.exists("users")
    assert client.list_calls == 2


def test_failed_refresh_keeps_previous_cache():
    client = CountingClient([RemoteTableDescriptor(name="users")])
    snapshot = RemoteSnapshot(client)
    snapshot.list_tables()

    client.error = RemoteCommunicationError("gateway down")
    with pytest.raises(RemoteCommunicationError, match="gateway down"):
        snapshot.list_tables(force_refresh=True)

    client.error = None
    assert snapshot.exists("users") is True
    assert client.list_calls == 2


def test_other_client_errors_are_wrapped_as_communication_errors():
    snapshot = RemoteSnapshot(CountingClient(error=ClusterOperationError("boom")))
    with pytest.raises(RemoteCommunicationError, match="ClusterOperationError: boom"):
        snapshot.exists("users")
    assert snapshot.is_loaded is False
