"""Base provisioner interface and abstract classes."""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional
from dataclasses import dataclass, field
from enum import Enum

from neutron_deploy.utils.openstack_client import OpenStackClientManager


class ChangeType(Enum):
    """Type of change for a resource."""
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NO_CHANGE = "no_change"


@dataclass
class Resource:
    """Represents a Networking resource.

    For a desired resource ``properties`` holds the validated arguments;
    for a current resource it holds the attributes read back from the API.
    """
    id: str
    type: str
    physical_id: Optional[str]
    properties: dict
    region: Optional[str] = None
    tags: list[str] = field(default_factory=list)


@dataclass
class ProvisionPlan:
    """Plan for provisioning a resource."""
    resource: Resource
    change_type: ChangeType
    current_state: Optional[Resource]
    changed_attributes: list[str] = field(default_factory=list)


class BaseProvisioner(ABC):
    """Base class for all resource provisioners."""

    type_name: str = ""

    def __init__(
        self,
        client_manager: OpenStackClientManager,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize provisioner with the shared client manager.

        Args:
            client_manager: Connection cache used to reach the Networking API
            sleep: Sleep function used while polling
        """
        self.client_manager = client_manager
        self._sleep = sleep

    def network(self, region: Optional[str]):
        """Networking v2 proxy for a region."""
        return self.client_manager.network_client(region)

    @abstractmethod
    def desired_resource(self, address: str, args: dict) -> Resource:
        """Validate configured arguments and build the desired resource."""
        pass

    @abstractmethod
    def plan(self, desired: Resource, current: Optional[Resource]) -> ProvisionPlan:
        """Determine what changes are needed for the resource.

        Args:
            desired: The desired state of the resource
            current: The current state of the resource (None if doesn't exist)

        Returns:
            ProvisionPlan describing the changes needed
        """
        pass

    @abstractmethod
    def provision(self, plan: ProvisionPlan) -> Resource:
        """Execute the provisioning plan.

        Args:
            plan: The provisioning plan to execute

        Returns:
            Resource with physical_id set and attributes read back
        """
        pass

    @abstractmethod
    def destroy(self, resource: Resource) -> None:
        """Destroy the resource.

        Args:
            resource: The resource to destroy
        """
        pass

    def get_current_state(self, resource: Resource) -> Optional[Resource]:
        """Fetch current resource state from OpenStack.

        Args:
            resource: Resource with its physical_id (from state)

        Returns:
            Current resource state or None if doesn't exist
        """
        # Default implementation - subclasses should override
        return None

    def exists(self, resource: Resource) -> bool:
        """Whether the remote object is still present."""
        return self.get_current_state(resource) is not None
