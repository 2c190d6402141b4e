"""Shared fixtures: an OpenStack client manager wired to a mocked network proxy."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from neutron_deploy.config.models import ProviderConfig
from neutron_deploy.utils.openstack_client import OpenStackClientManager


@pytest.fixture
def network():
    """Mocked ``conn.network`` proxy."""
    return MagicMock(name="network")


@pytest.fixture
def client_manager(network):
    """Client manager whose default region is RegionOne and which never connects."""
    manager = OpenStackClientManager(ProviderConfig(region="RegionOne"))
    manager.network_client = MagicMock(return_value=network)
    return manager


def _router(**overrides):
    attrs = dict(
        id="router-1",
        name="router_1",
        description="",
        is_admin_state_up=True,
        is_distributed=False,
        status="ACTIVE",
        project_id="project-1",
        external_gateway_info=None,
        routes=[],
        availability_zone_hints=[],
        tags=[],
    )
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


def _trunk(**overrides):
    attrs = dict(
        id="trunk-1",
        name="trunk_1",
        description="",
        port_id="parent-port",
        is_admin_state_up=True,
        status="ACTIVE",
        project_id="project-1",
        sub_ports=[],
        tags=[],
    )
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


def _subnet_pool(**overrides):
    attrs = dict(
        id="pool-1",
        name="subnetpool_1",
        description="",
        prefixes=["10.10.0.0/16", "10.11.11.0/24"],
        default_quota=None,
        default_prefix_length=8,
        minimum_prefix_length=8,
        maximum_prefix_length=32,
        address_scope_id=None,
        ip_version=4,
        is_shared=False,
        is_default=False,
        project_id="project-1",
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-01T00:00:00Z",
        revision_number=1,
        tags=[],
    )
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


@pytest.fixture
def make_router():
    return _router


@pytest.fixture
def make_trunk():
    return _trunk


@pytest.fixture
def make_subnet_pool():
    return _subnet_pool
