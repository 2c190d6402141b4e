"""Schema for the router data source."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Arguments, Attributes


class RouterDataSourceArgs(Arguments):
    """Filters accepted by ``openstack_networking_router_v2``."""

    router_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    admin_state_up: Optional[bool] = None
    distributed: Optional[bool] = None
    status: Optional[str] = None
    tenant_id: Optional[str] = None


class ExternalFixedIP(BaseModel):
    """Address on the external gateway port."""

    subnet_id: str = ""
    ip_address: str = ""


class RouterRoute(BaseModel):
    """Static route configured on a router."""

    destination_cidr: str
    next_hop: str


class RouterAttributes(Attributes):
    """Attributes produced by the router data source."""

    name: str = ""
    description: str = ""
    admin_state_up: Optional[bool] = None
    distributed: Optional[bool] = None
    status: str = ""
    tenant_id: str = ""
    external_network_id: str = ""
    enable_snat: Optional[bool] = None
    external_qos_policy_id: str = ""
    external_fixed_ip: List[ExternalFixedIP] = Field(default_factory=list)
    routes: List[RouterRoute] = Field(default_factory=list)
    availability_zone_hints: List[str] = Field(default_factory=list)
