"""Unit tests for the router lookup."""

import pytest
from openstack import exceptions as os_exceptions
from pydantic import ValidationError

from neutron_deploy.data_sources import RouterDataSource
from neutron_deploy.utils.errors import MultipleResultsError, NoResultsError, ProviderError


def test_read_by_name(client_manager, network, make_router):
    network.routers.return_value = iter([make_router()])

    result = RouterDataSource(client_manager).read({"name": "router_1"})

    network.routers.assert_called_once_with(name="router_1")
    assert result.id == "router-1"
    assert result.region == "RegionOne"
    assert result.attributes["name"] == "router_1"
    assert result.attributes["admin_state_up"] is True
    assert result.attributes["tenant_id"] == "project-1"


def test_filters_translated_to_sdk_names(client_manager, network, make_router):
    network.routers.return_value = [make_router()]

    RouterDataSource(client_manager).read({
        "router_id": "router-1",
        "description": "edge",
        "status": "ACTIVE",
        "tenant_id": "project-1",
        "distributed": True,
        "tags": ["b", "a"],
    })

    network.routers.assert_called_once_with(
        id="router-1",
        description="edge",
        status="ACTIVE",
        project_id="project-1",
        is_distributed=True,
        tags="a,b",
    )


def test_explicit_false_admin_state_is_a_filter(client_manager, network, make_router):
    network.routers.return_value = [make_router(is_admin_state_up=False)]

    result = RouterDataSource(client_manager).read({"admin_state_up": False})

    network.routers.assert_called_once_with(is_admin_state_up=False)
    assert result.attributes["admin_state_up"] is False


def test_gateway_and_routes_exposed(client_manager, network, make_router):
    network.routers.return_value = [make_router(
        external_gateway_info={
            "network_id": "ext-net",
            "enable_snat": True,
            "qos_policy_id": "qos-1",
            "external_fixed_ips": [{"subnet_id": "ext-subnet", "ip_address": "203.0.113.10"}],
        },
        routes=[{"destination": "10.0.1.0/24", "nexthop": "192.168.199.254"}],
        availability_zone_hints=["nova"],
        tags=["prod", "edge"],
    )]

    attrs = RouterDataSource(client_manager).read({"name": "router_1"}).attributes

    assert attrs["external_network_id"] == "ext-net"
    assert attrs["enable_snat"] is True
    assert attrs["external_qos_policy_id"] == "qos-1"
    assert attrs["external_fixed_ip"] == [
        {"subnet_id": "ext-subnet", "ip_address": "203.0.113.10"}
    ]
    assert attrs["routes"] == [
        {"destination_cidr": "10.0.1.0/24", "next_hop": "192.168.199.254"}
    ]
    assert attrs["availability_zone_hints"] == ["nova"]
    assert attrs["all_tags"] == ["edge", "prod"]


def test_router_without_gateway(client_manager, network, make_router):
    network.routers.return_value = [make_router()]

    attrs = RouterDataSource(client_manager).read({}).attributes

    assert attrs["external_network_id"] == ""
    assert attrs["enable_snat"] is None
    assert attrs["external_fixed_ip"] == []


def test_no_router_found(client_manager, network):
    network.routers.return_value = []

    with pytest.raises(NoResultsError, match="No Router found"):
        RouterDataSource(client_manager).read({"name": "missing"})


def test_more_than_one_router_found(client_manager, network, make_router):
    network.routers.return_value = [make_router(), make_router(id="router-2")]

    with pytest.raises(MultipleResultsError, match="More than one Router found"):
        RouterDataSource(client_manager).read({"name": "router_1"})


def test_list_failure_is_reported(client_manager, network):
    network.routers.side_effect = os_exceptions.HttpException(message="boom", http_status=500)

    with pytest.raises(ProviderError, match="Unable to list Routers"):
        RouterDataSource(client_manager).read({"name": "router_1"})


def test_region_argument_overrides_default(client_manager, network, make_router):
    network.routers.return_value = [make_router()]

    result = RouterDataSource(client_manager).read({"region": "RegionTwo", "name": "router_1"})

    client_manager.network_client.assert_called_once_with("RegionTwo")
    assert result.attributes["region"] == "RegionTwo"


def test_unknown_argument_rejected(client_manager):
    with pytest.raises(ValidationError):
        RouterDataSource(client_manager).read({"flavor": "large"})
