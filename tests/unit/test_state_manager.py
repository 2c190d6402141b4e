"""Unit tests for state persistence and locking."""

import json
from datetime import timezone

import pytest

from neutron_deploy.state import (
    Resource,
    State,
    StateLockError,
    StateManager,
    StateNotFoundError,
    state_path_for,
)
from neutron_deploy.utils.errors import StateError

ADDRESS = "openstack_networking_subnetpool_v2.subnetpool_1"


def _pool_resource(**overrides):
    fields = dict(
        id=ADDRESS,
        type="openstack_networking_subnetpool_v2",
        physical_id="pool-1",
        region="RegionOne",
        attributes={"prefixes": ["10.10.0.0/16"], "timeouts": {"create": 600, "delete": 600}},
    )
    fields.update(overrides)
    return Resource(**fields)


def test_state_path_for_workspace():
    assert str(state_path_for("lab")) == ".neutron/state/lab.json"


def test_load_missing(tmp_path):
    with pytest.raises(StateNotFoundError):
        StateManager(str(tmp_path / "lab.json")).load()


def test_save_and_load(tmp_path):
    manager = StateManager(str(tmp_path / "state" / "lab.json"))
    state = manager.initialize("lab", cloud="devstack", region="RegionOne")
    state.add_resource(_pool_resource())
    manager.save(state)

    loaded = StateManager(str(tmp_path / "state" / "lab.json")).load()

    assert loaded.workspace == "lab"
    assert loaded.cloud == "devstack"
    assert loaded.get_resource(ADDRESS).physical_id == "pool-1"
    assert loaded.get_resource(ADDRESS).attributes["prefixes"] == ["10.10.0.0/16"]


def test_save_leaves_no_temporary_file(tmp_path):
    manager = StateManager(str(tmp_path / "lab.json"))
    manager.initialize("lab")

    assert not (tmp_path / "lab.tmp").exists()
    assert json.loads((tmp_path / "lab.json").read_text())["workspace"] == "lab"


def test_corrupt_state(tmp_path):
    path = tmp_path / "lab.json"
    path.write_text("{not json")

    with pytest.raises(StateError, match="Failed to parse state file"):
        StateManager(str(path)).load()


def test_invalid_state_document(tmp_path):
    path = tmp_path / "lab.json"
    path.write_text(json.dumps({"version": "1.0"}))

    with pytest.raises(StateError, match="Invalid state file"):
        StateManager(str(path)).load()


def test_load_or_initialize(tmp_path):
    manager = StateManager(str(tmp_path / "lab.json"))

    first = manager.load_or_initialize("lab")
    first.add_resource(_pool_resource())
    manager.save(first)

    assert manager.load_or_initialize("lab").get_resource(ADDRESS) is not None


def test_remove_resource():
    state = State(workspace="lab")
    state.add_resource(_pool_resource())

    removed = state.remove_resource(ADDRESS)

    assert removed.id == ADDRESS
    assert state.remove_resource(ADDRESS) is None
    assert state.list_resources() == []


def test_data_reads_kept_apart_from_resources():
    state = State(workspace="lab")
    state.set_data(Resource(id="openstack_networking_router_v2.r", type="openstack_networking_router_v2"))

    assert state.get_data("openstack_networking_router_v2.r") is not None
    assert state.get_resource("openstack_networking_router_v2.r") is None


def test_manager_requires_loaded_state(tmp_path):
    with pytest.raises(StateError, match="State not loaded"):
        StateManager(str(tmp_path / "lab.json")).get_state()


def test_context_manager_locks_and_loads(tmp_path):
    path = tmp_path / "lab.json"
    StateManager(str(path)).initialize("lab")

    with StateManager(str(path)) as manager:
        assert manager.get_state().workspace == "lab"
        with pytest.raises(StateLockError):
            StateManager(str(path)).lock(timeout=0)


def test_timestamps_are_timezone_aware(tmp_path):
    state = State(workspace="lab")
    assert state.timestamp.tzinfo is timezone.utc

    state.add_resource(_pool_resource())
    assert state.timestamp.tzinfo is timezone.utc

    manager = StateManager(str(tmp_path / "lab.json"))
    manager.save(state)
    assert manager.load().timestamp.utcoffset().total_seconds() == 0
