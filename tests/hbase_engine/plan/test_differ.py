import pytest

from src.enums import Compression
from src.hbase_engine.models import ColumnFamilySpec, TableSchema
from src.hbase_engine.plan.differ import Differ, build_table_descriptor
from src.hbase_engine.plan.diffs import FamilyModification, TableDiff
from src.hbase_engine.state.states import RemoteTableDescriptor

# ---------- Differ ----------


def test_missing_remote_table_needs_create(audit_desired):
    diff = Differ().diff(audit_desired, None)
    assert diff == TableDiff(table_name="audit", exists=False)


def test_users_partitions_into_add_modify_delete(users_desired, users_remote):
    diff = Differ().diff(users_desired, users_remote)

    assert diff.exists is True
    assert [f.name for f in diff.to_add] == ["stats"]
    assert diff.to_add[0].compression is Compression.GZ
    assert [m.name for m in diff.to_modify] == ["info"]
    assert diff.to_modify[0].old.max_versions == 1
    assert diff.to_modify[0].new.max_versions == 3
    assert diff.to_delete == ("legacy",)
    assert diff.summary() == "add=1, modify=1, delete=1"
    assert diff.change_count == 3


def test_identical_table_has_empty_diff(events_desired, events_remote):
    diff = Differ().diff(events_desired, events_remote)
    assert diff.is_empty
    assert diff.change_count == 0


def test_defaults_in_document_match_explicit_defaults_on_cluster():
    desired = TableSchema.of("t", [ColumnFamilySpec(name="cf")])
    remote = RemoteTableDescriptor.from_families("t", [ColumnFamilySpec(name="cf").resolved()])
    assert Differ().diff(desired, remote).is_empty


def test_renamed_family_is_delete_plus_add():
    desired = TableSchema.of("t", [ColumnFamilySpec(name="new")])
    remote = RemoteTableDescriptor.from_families("t", [ColumnFamilySpec(name="old")])
    diff = Differ().diff(desired, remote)
    assert [f.name for f in diff.to_add] == ["new"]
    assert diff.to_delete == ("old",)
    assert diff.to_modify == ()


@pytest.mark.parametrize(
    ("desired_names", "remote_names", "changed"),
    [
        ({"a", "b"}, {"b", "c"}, {"b"}),
        ({"a"}, set(), set()),
        (set(), {"x", "y"}, set()),
        ({"a", "b", "c"}, {"a", "b", "c"}, {"a", "c"}),
    ],
)
def test_every_family_lands_in_exactly_one_partition(desired_names, remote_names, changed):
    desired = TableSchema.of(
        "t",
        [ColumnFamilySpec(name=n, max_versions=5 if n in changed else None) for n in desired_names],
    )
    remote = RemoteTableDescriptor.from_families(
        "t", [ColumnFamilySpec(name=n) for n in remote_names]
    )
    diff = Differ().diff(desired, remote)

    added = {f.name for f in diff.to_add}
    modified = {m.name for m in diff.to_modify}
    deleted = set(diff.to_delete)
    unchanged = (desired_names & remote_names) - modified

    assert added == desired_names - remote_names
    assert deleted == remote_names - desired_names
    assert modified == (desired_names & remote_names) & changed
    assert not (added & modified or added & deleted or modified & deleted)
    assert added | modified | deleted | unchanged == desired_names | remote_names
    assert diff.is_empty == (desired_names == remote_names and not changed)


# ---------- build_table_descriptor ----------


def test_descriptor_for_create_carries_resolved_families(users_desired):
    descriptor = build_table_descriptor(users_desired)
    assert descriptor.name == "users"
    assert descriptor.family_names == ("info", "stats")
    assert descriptor.family("stats").max_versions == 1
    assert descriptor.family("info") == ColumnFamilySpec(name="info", max_versions=3).resolved()


def test_family_modification_name_comes_from_new_spec():
    change = FamilyModification(old=ColumnFamilySpec(name="cf"), new=ColumnFamilySpec(name="cf"))
    assert change.name == "cf"
