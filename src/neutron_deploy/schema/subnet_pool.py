"""Schema for the subnet pool resource and data source."""

import ipaddress
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import Arguments, Attributes

DEFAULT_TIMEOUT = 600


class SubnetPoolTimeouts(BaseModel):
    """Wait limits in seconds."""

    model_config = ConfigDict(extra="forbid")

    create: int = Field(DEFAULT_TIMEOUT, ge=1)
    delete: int = Field(DEFAULT_TIMEOUT, ge=1)


class SubnetPoolArgs(Arguments):
    """Arguments of the ``openstack_networking_subnetpool_v2`` resource."""

    name: Optional[str] = None
    description: Optional[str] = None
    prefixes: List[str] = Field(..., min_length=1)
    default_quota: Optional[int] = Field(None, ge=0)
    default_prefixlen: Optional[int] = Field(None, ge=0, le=128)
    min_prefixlen: Optional[int] = Field(None, ge=0, le=128)
    max_prefixlen: Optional[int] = Field(None, ge=0, le=128)
    address_scope_id: Optional[str] = None
    shared: Optional[bool] = None
    is_default: Optional[bool] = None
    project_id: Optional[str] = None
    value_specs: Dict[str, str] = Field(default_factory=dict)
    timeouts: SubnetPoolTimeouts = Field(default_factory=SubnetPoolTimeouts)

    @field_validator("prefixes")
    @classmethod
    def check_prefixes(cls, v: List[str]) -> List[str]:
        """Every prefix must be a network address in CIDR form. Order is kept as given."""
        for prefix in v:
            try:
                ipaddress.ip_network(prefix)
            except ValueError:
                raise ValueError(f"Invalid CIDR prefix: {prefix}")
        return v


class SubnetPoolDataSourceArgs(Arguments):
    """Filters accepted by the ``openstack_networking_subnetpool_v2`` data source."""

    name: Optional[str] = None
    description: Optional[str] = None
    default_quota: Optional[int] = None
    project_id: Optional[str] = None
    default_prefixlen: Optional[int] = None
    min_prefixlen: Optional[int] = None
    max_prefixlen: Optional[int] = None
    address_scope_id: Optional[str] = None
    ip_version: Optional[Literal[4, 6]] = None
    shared: Optional[bool] = None
    is_default: Optional[bool] = None


class SubnetPoolAttributes(Attributes):
    """Attributes of a subnet pool as read back from the API."""

    name: str = ""
    description: str = ""
    prefixes: List[str] = Field(default_factory=list)
    default_quota: Optional[int] = None
    default_prefixlen: Optional[int] = None
    min_prefixlen: Optional[int] = None
    max_prefixlen: Optional[int] = None
    address_scope_id: str = ""
    ip_version: Optional[int] = None
    shared: Optional[bool] = None
    is_default: Optional[bool] = None
    project_id: str = ""
    created_at: str = ""
    updated_at: str = ""
    revision_number: Optional[int] = None
    value_specs: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_sdk(
        cls,
        obj: Any,
        region: Optional[str] = None,
        tags: Optional[List[str]] = None,
        value_specs: Optional[Dict[str, str]] = None,
    ) -> "SubnetPoolAttributes":
        """Map an SDK subnet pool to attributes. Prefix order is kept as returned."""
        return cls(
            id=obj.id,
            region=region,
            name=obj.name or "",
            description=obj.description or "",
            prefixes=list(obj.prefixes or []),
            default_quota=obj.default_quota,
            default_prefixlen=obj.default_prefix_length,
            min_prefixlen=obj.minimum_prefix_length,
            max_prefixlen=obj.maximum_prefix_length,
            address_scope_id=obj.address_scope_id or "",
            ip_version=obj.ip_version,
            shared=obj.is_shared,
            is_default=obj.is_default,
            project_id=obj.project_id or "",
            created_at=obj.created_at or "",
            updated_at=obj.updated_at or "",
            revision_number=obj.revision_number,
            value_specs=dict(value_specs or {}),
            tags=list(tags or []),
            all_tags=sorted(obj.tags or []),
        )
