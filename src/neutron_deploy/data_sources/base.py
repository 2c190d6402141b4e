"""Base data source interface for singleton lookups."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type

from openstack import exceptions as os_exceptions

from neutron_deploy.schema.common import Arguments, Attributes
from neutron_deploy.utils.errors import (
    ErrorContext,
    MultipleResultsError,
    NoResultsError,
    error_handler,
)
from neutron_deploy.utils.logging import get_logger
from neutron_deploy.utils.openstack_client import OpenStackClientManager

logger = get_logger(__name__)


@dataclass
class DataSourceResult:
    """Outcome of a successful lookup."""
    id: str
    type: str
    region: Optional[str]
    attributes: Dict[str, Any] = field(default_factory=dict)


class BaseDataSource(ABC):
    """Base class for read-only lookups that must match exactly one object."""

    type_name: str = ""
    args_model: Type[Arguments] = Arguments

    # Messages reported to the user
    list_error: str = "Unable to list objects"
    no_results_message: str = "No object found"
    multiple_results_message: str = "More than one object found"

    def __init__(self, client_manager: OpenStackClientManager):
        """Initialize data source with the shared client manager.

        Args:
            client_manager: Connection cache used to reach the Networking API
        """
        self.client_manager = client_manager

    def read(self, args: Mapping[str, Any]) -> DataSourceResult:
        """Run the lookup described by ``args``.

        Args:
            args: Raw arguments from configuration

        Returns:
            DataSourceResult with the matched object's attributes

        Raises:
            ValidationError: If the arguments do not fit the schema
            NoResultsError: If nothing matched
            MultipleResultsError: If more than one object matched
            ProviderError: If the API call failed
        """
        params = self.args_model(**args)
        region = self.client_manager.get_region(args)
        network = self.client_manager.network_client(region)

        query = self.build_query(params)
        logger.debug(f"Listing {self.type_name} with filters {query}")

        try:
            objects = list(self.list_objects(network, query))
        except (os_exceptions.SDKException, ConnectionError, TimeoutError) as e:
            context = ErrorContext(resource_type=self.type_name, operation='list', region=region)
            raise error_handler.handle_exception(e, context).rephrase(
                f"{self.list_error}: {e}"
            ) from e

        obj = self.select_one(objects)
        logger.debug(f"Retrieved {self.type_name} {obj.id}: {obj}")

        attributes = self.to_attributes(obj, params, region)
        return DataSourceResult(
            id=obj.id,
            type=self.type_name,
            region=region,
            attributes=attributes.model_dump(),
        )

    def select_one(self, objects: List[Any]) -> Any:
        """Return the only element of ``objects``."""
        if len(objects) < 1:
            raise NoResultsError(self.no_results_message)
        if len(objects) > 1:
            raise MultipleResultsError(
                self.multiple_results_message,
                suggestions=[f"{len(objects)} objects matched; add more filters"]
            )
        return objects[0]

    @abstractmethod
    def build_query(self, params: Arguments) -> Dict[str, Any]:
        """Translate arguments into SDK list filters."""
        pass

    @abstractmethod
    def list_objects(self, network, query: Dict[str, Any]):
        """Call the SDK list operation."""
        pass

    @abstractmethod
    def to_attributes(self, obj: Any, params: Arguments, region: Optional[str]) -> Attributes:
        """Map the matched SDK object to state attributes."""
        pass
