"""Unit tests for connection setup and region resolution."""

from unittest.mock import MagicMock

import pytest
from openstack import exceptions as os_exceptions

from neutron_deploy.config.models import ProviderConfig
from neutron_deploy.utils import openstack_client
from neutron_deploy.utils.errors import ConfigurationError
from neutron_deploy.utils.openstack_client import OpenStackClientManager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("OS_CLOUD", raising=False)
    monkeypatch.delenv("OS_REGION_NAME", raising=False)


def test_region_argument_wins():
    manager = OpenStackClientManager(ProviderConfig(region="RegionOne"))

    assert manager.get_region({"region": "RegionTwo"}) == "RegionTwo"
    assert manager.get_region({"region": ""}) == "RegionOne"
    assert manager.get_region() == "RegionOne"


def test_region_from_environment(monkeypatch):
    monkeypatch.setenv("OS_REGION_NAME", "RegionEnv")

    assert OpenStackClientManager(ProviderConfig()).default_region == "RegionEnv"


def test_connect_with_cloud(monkeypatch):
    connect = MagicMock()
    monkeypatch.setattr(openstack_client.openstack, "connect", connect)
    manager = OpenStackClientManager(ProviderConfig(cloud="devstack", insecure=True))

    manager.get_connection("RegionOne")
    manager.get_connection("RegionOne")

    connect.assert_called_once_with(cloud="devstack", region_name="RegionOne", verify=False)


def test_connect_with_os_cloud(monkeypatch):
    monkeypatch.setenv("OS_CLOUD", "envcloud")
    connect = MagicMock()
    monkeypatch.setattr(openstack_client.openstack, "connect", connect)

    OpenStackClientManager(ProviderConfig()).get_connection()

    connect.assert_called_once_with(cloud="envcloud")


def test_connect_with_explicit_credentials(monkeypatch):
    connection_cls = MagicMock()
    monkeypatch.setattr(openstack_client.connection, "Connection", connection_cls)
    config = ProviderConfig(
        auth_url="https://keystone.example.com/v3",
        username="admin",
        password="secret",
        project_name="admin",
        interface="internal",
    )

    OpenStackClientManager(config).get_connection("RegionOne")

    connection_cls.assert_called_once_with(
        auth_url="https://keystone.example.com/v3",
        username="admin",
        password="secret",
        project_name="admin",
        user_domain_name="Default",
        project_domain_name="Default",
        region_name="RegionOne",
        interface="internal",
    )


def test_no_cloud_configured():
    with pytest.raises(ConfigurationError, match="No OpenStack cloud configured"):
        OpenStackClientManager(ProviderConfig()).network_client()


def test_sdk_failure_wrapped(monkeypatch):
    monkeypatch.setattr(
        openstack_client.openstack,
        "connect",
        MagicMock(side_effect=os_exceptions.ConfigException("cloud devstack not found")),
    )

    with pytest.raises(ConfigurationError, match="Error creating OpenStack networking client"):
        OpenStackClientManager(ProviderConfig(cloud="devstack")).network_client()


def test_close_drops_connections(monkeypatch):
    conn = MagicMock()
    monkeypatch.setattr(openstack_client.openstack, "connect", MagicMock(return_value=conn))
    manager = OpenStackClientManager(ProviderConfig(cloud="devstack"))
    manager.get_connection()

    manager.close()

    conn.close.assert_called_once()
    assert manager._connections == {}
