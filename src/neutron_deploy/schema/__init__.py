"""Attribute schemas for every registered data source and resource."""

from .common import Arguments, Attributes
from .router import ExternalFixedIP, RouterAttributes, RouterDataSourceArgs, RouterRoute
from .subnet_pool import (
    SubnetPoolArgs,
    SubnetPoolAttributes,
    SubnetPoolDataSourceArgs,
    SubnetPoolTimeouts,
)
from .trunk import SubPort, TrunkAttributes, TrunkDataSourceArgs

ROUTER_V2 = "openstack_networking_router_v2"
TRUNK_V2 = "openstack_networking_trunk_v2"
SUBNETPOOL_V2 = "openstack_networking_subnetpool_v2"

# Argument models keyed by type name
DATA_SOURCE_SCHEMAS = {
    ROUTER_V2: RouterDataSourceArgs,
    TRUNK_V2: TrunkDataSourceArgs,
    SUBNETPOOL_V2: SubnetPoolDataSourceArgs,
}

RESOURCE_SCHEMAS = {
    SUBNETPOOL_V2: SubnetPoolArgs,
}

__all__ = [
    "Arguments",
    "Attributes",
    "ExternalFixedIP",
    "RouterAttributes",
    "RouterDataSourceArgs",
    "RouterRoute",
    "SubnetPoolArgs",
    "SubnetPoolAttributes",
    "SubnetPoolDataSourceArgs",
    "SubnetPoolTimeouts",
    "SubPort",
    "TrunkAttributes",
    "TrunkDataSourceArgs",
    "ROUTER_V2",
    "TRUNK_V2",
    "SUBNETPOOL_V2",
    "DATA_SOURCE_SCHEMAS",
    "RESOURCE_SCHEMAS",
]
