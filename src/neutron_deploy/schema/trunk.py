"""Schema for the trunk data source."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Arguments, Attributes


class TrunkDataSourceArgs(Arguments):
    """Filters accepted by ``openstack_networking_trunk_v2``."""

    trunk_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    port_id: Optional[str] = None
    admin_state_up: Optional[bool] = None
    status: Optional[str] = None
    project_id: Optional[str] = None


class SubPort(BaseModel):
    """A port attached to a trunk with its VLAN segmentation."""

    port_id: str
    segmentation_type: str = ""
    segmentation_id: int = 0


class TrunkAttributes(Attributes):
    """Attributes produced by the trunk data source."""

    name: str = ""
    description: str = ""
    port_id: str = ""
    admin_state_up: Optional[bool] = None
    status: str = ""
    project_id: str = ""
    sub_port: List[SubPort] = Field(default_factory=list)
