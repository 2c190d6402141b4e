"""Unit tests for the trunk lookup."""

import pytest
from openstack import exceptions as os_exceptions

from neutron_deploy.data_sources import TrunkDataSource
from neutron_deploy.data_sources.trunk import flatten_sub_ports
from neutron_deploy.utils.errors import MultipleResultsError, NoResultsError, ProviderError


def test_read_by_name(client_manager, network, make_trunk):
    network.trunks.return_value = [make_trunk()]

    result = TrunkDataSource(client_manager).read({"name": "trunk_1"})

    network.trunks.assert_called_once_with(name="trunk_1")
    assert result.id == "trunk-1"
    assert result.attributes["port_id"] == "parent-port"
    assert result.attributes["sub_port"] == []


def test_sub_ports_flattened_in_api_order(client_manager, network, make_trunk):
    network.trunks.return_value = [make_trunk(sub_ports=[
        {"port_id": "sub-b", "segmentation_type": "vlan", "segmentation_id": 2},
        {"port_id": "sub-a", "segmentation_type": "vlan", "segmentation_id": 1},
    ])]

    attrs = TrunkDataSource(client_manager).read({"name": "trunk_1"}).attributes

    assert attrs["sub_port"] == [
        {"port_id": "sub-b", "segmentation_type": "vlan", "segmentation_id": 2},
        {"port_id": "sub-a", "segmentation_type": "vlan", "segmentation_id": 1},
    ]


def test_sub_port_without_segmentation():
    sub_ports = flatten_sub_ports([{"port_id": "sub-1"}])

    assert sub_ports[0].segmentation_type == ""
    assert sub_ports[0].segmentation_id == 0


def test_filters_and_tags(client_manager, network, make_trunk):
    network.trunks.return_value = [make_trunk()]

    TrunkDataSource(client_manager).read({
        "trunk_id": "trunk-1",
        "port_id": "parent-port",
        "project_id": "project-1",
        "status": "ACTIVE",
        "admin_state_up": False,
        "tags": ["t1", "t2"],
    })

    network.trunks.assert_called_once_with(
        id="trunk-1",
        port_id="parent-port",
        project_id="project-1",
        status="ACTIVE",
        is_admin_state_up=False,
        tags="t1,t2",
    )


def test_no_results(client_manager, network):
    network.trunks.return_value = []

    with pytest.raises(NoResultsError, match="Your query returned no results"):
        TrunkDataSource(client_manager).read({"name": "missing"})


def test_more_than_one_result(client_manager, network, make_trunk):
    network.trunks.return_value = [make_trunk(), make_trunk(id="trunk-2")]

    with pytest.raises(MultipleResultsError, match="more than one result"):
        TrunkDataSource(client_manager).read({"name": "trunk_1"})


def test_list_failure(client_manager, network):
    network.trunks.side_effect = os_exceptions.SDKException("connection reset")

    with pytest.raises(ProviderError, match="Unable to retrieve trunks: connection reset"):
        TrunkDataSource(client_manager).read({"name": "trunk_1"})
