"""Unit tests for YAML configuration loading and validation."""

import textwrap

import pytest

from neutron_deploy.config import Config, ConfigValidationError, ProviderConfig


def _write(tmp_path, content):
    path = tmp_path / "neutron.yaml"
    path.write_text(textwrap.dedent(content))
    return path


def test_load_valid_config(tmp_path):
    path = _write(tmp_path, """
        workspace: lab
        provider:
          cloud: devstack
          region: RegionOne
        data:
          - type: openstack_networking_router_v2
            name: router_1
            args:
              name: router_1
        resources:
          - type: openstack_networking_subnetpool_v2
            name: subnetpool_1
            args:
              name: subnetpool_1
              prefixes: ["10.10.0.0/16", "10.11.11.0/24"]
    """)

    config = Config(str(path)).load()

    assert config.workspace == "lab"
    assert config.provider.cloud == "devstack"
    assert config.get_data_source("openstack_networking_router_v2.router_1").args == {
        "name": "router_1"
    }
    pool = config.get_resource("openstack_networking_subnetpool_v2.subnetpool_1")
    assert pool.args["prefixes"] == ["10.10.0.0/16", "10.11.11.0/24"]


def test_empty_args_allowed(tmp_path):
    path = _write(tmp_path, """
        data:
          - type: openstack_networking_trunk_v2
            name: trunk_1
            args:
    """)

    config = Config(str(path)).load()

    assert config.data_sources[0].args == {}
    assert config.workspace == "default"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "absent.yaml")).load()


def test_unsupported_type_reported(tmp_path):
    path = _write(tmp_path, """
        resources:
          - type: openstack_networking_router_v2
            name: r
    """)

    with pytest.raises(ConfigValidationError) as info:
        Config(str(path)).load()

    assert info.value.errors[0]["loc"] == ["resources", 0, "type"]
    assert "Unsupported type" in info.value.errors[0]["msg"]


def test_argument_errors_collected_with_location(tmp_path):
    path = _write(tmp_path, """
        data:
          - type: openstack_networking_router_v2
            name: a
            args: {flavor: large}
        resources:
          - type: openstack_networking_subnetpool_v2
            name: b
            args:
              prefixes: ["10.0.0.0/33"]
    """)

    with pytest.raises(ConfigValidationError) as info:
        Config(str(path)).load()

    locations = [error["loc"] for error in info.value.errors]
    assert ["data", 0, "args", "flavor"] in locations
    assert ["resources", 0, "args", "prefixes"] in locations
    assert "data -> 0 -> args -> flavor" in str(info.value)


def test_duplicate_address(tmp_path):
    path = _write(tmp_path, """
        data:
          - {type: openstack_networking_router_v2, name: r}
          - {type: openstack_networking_router_v2, name: r}
    """)

    with pytest.raises(ConfigValidationError, match="validation failed"):
        Config(str(path)).load()


def test_same_name_different_types_allowed(tmp_path):
    path = _write(tmp_path, """
        data:
          - {type: openstack_networking_router_v2, name: main}
          - {type: openstack_networking_trunk_v2, name: main}
    """)

    assert len(Config(str(path)).load().data_sources) == 2


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path, "data: [unclosed\n")

    with pytest.raises(ConfigValidationError, match="Failed to parse YAML"):
        Config(str(path)).load()


def test_cloud_and_auth_url_are_exclusive():
    with pytest.raises(ValueError, match="Cannot specify both"):
        ProviderConfig(cloud="devstack", auth_url="https://keystone/v3")


def test_auth_url_requires_credentials():
    with pytest.raises(ValueError, match="password, project_name required"):
        ProviderConfig(auth_url="https://keystone/v3", username="admin")


def test_to_dict_hides_password(tmp_path):
    path = _write(tmp_path, """
        provider:
          auth_url: https://keystone/v3
          username: admin
          password: secret
          project_name: admin
    """)

    data = Config(str(path)).load().to_dict()

    assert "password" not in data["provider"]
    assert data["provider"]["username"] == "admin"
