"""State file data models."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class Resource(BaseModel):
    """Represents a managed object or a data source read."""

    id: str = Field(..., description="Address (e.g., openstack_networking_subnetpool_v2.main)")
    type: str = Field(..., description="Type name (e.g., openstack_networking_subnetpool_v2)")
    physical_id: Optional[str] = Field(None, description="OpenStack UUID")
    region: Optional[str] = Field(None, description="Region the object lives in")
    attributes: Dict[str, Any] = Field(
        default_factory=dict, description="Attributes read back from the API"
    )
    tags: List[str] = Field(default_factory=list, description="Tags present on the object")
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata (update time, etc.)"
    )


class State(BaseModel):
    """Represents the complete state of one workspace."""

    version: str = Field("1.0", description="State file format version")
    workspace: str = Field(..., description="Workspace name")
    cloud: Optional[str] = Field(None, description="clouds.yaml entry used")
    region: Optional[str] = Field(None, description="Default region")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Last update timestamp"
    )
    resources: Dict[str, Resource] = Field(
        default_factory=dict, description="Managed resources, keyed by address"
    )
    data: Dict[str, Resource] = Field(
        default_factory=dict, description="Data source reads, keyed by address"
    )

    def add_resource(self, resource: Resource) -> None:
        """Add or replace a managed resource."""
        self.resources[resource.id] = resource
        self.timestamp = datetime.now(timezone.utc)

    def remove_resource(self, address: str) -> Optional[Resource]:
        """Remove a managed resource and return it."""
        resource = self.resources.pop(address, None)
        if resource is not None:
            self.timestamp = datetime.now(timezone.utc)
        return resource

    def get_resource(self, address: str) -> Optional[Resource]:
        """Get a managed resource by address."""
        return self.resources.get(address)

    def set_data(self, resource: Resource) -> None:
        """Record the latest read of a data source."""
        self.data[resource.id] = resource
        self.timestamp = datetime.now(timezone.utc)

    def get_data(self, address: str) -> Optional[Resource]:
        return self.data.get(address)

    def list_resources(self) -> List[Resource]:
        """Get all managed resources, sorted by address."""
        return [self.resources[k] for k in sorted(self.resources)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "State":
        """Create State from dictionary."""
        return cls.model_validate(data)
