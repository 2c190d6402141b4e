"""Provider entry point: type registries and diagnostics-returning operations."""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type

from openstack import exceptions as os_exceptions
from pydantic import ValidationError as PydanticValidationError

from neutron_deploy.config.models import ProviderConfig
from neutron_deploy.data_sources import (
    BaseDataSource,
    RouterDataSource,
    SubnetPoolDataSource,
    TrunkDataSource,
)
from neutron_deploy.provisioners import (
    BaseProvisioner,
    ChangeType,
    ProvisionPlan,
    Resource,
    SubnetPoolProvisioner,
)
from neutron_deploy.schema import ROUTER_V2, SUBNETPOOL_V2, TRUNK_V2
from neutron_deploy.state.models import Resource as StateResource
from neutron_deploy.utils.errors import (
    ConfigurationError,
    Diagnostic,
    ErrorContext,
    ErrorSeverity,
    ProviderError,
    error_handler,
)
from neutron_deploy.utils.logging import LogContext, get_logger
from neutron_deploy.utils.openstack_client import OpenStackClientManager

logger = get_logger(__name__)

DATA_SOURCES: Dict[str, Type[BaseDataSource]] = {
    ROUTER_V2: RouterDataSource,
    TRUNK_V2: TrunkDataSource,
    SUBNETPOOL_V2: SubnetPoolDataSource,
}

RESOURCES: Dict[str, Type[BaseProvisioner]] = {
    SUBNETPOOL_V2: SubnetPoolProvisioner,
}

# Failures turned into diagnostics instead of propagating
HANDLED_ERRORS = (
    ProviderError,
    os_exceptions.SDKException,
    PydanticValidationError,
    ConnectionError,
    TimeoutError,
)


@dataclass
class Result:
    """Outcome of a provider call."""
    attributes: Dict[str, Any] = field(default_factory=dict)
    physical_id: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    plan: Optional[ProvisionPlan] = None
    resource: Optional[Resource] = None

    @property
    def ok(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)


def to_state_resource(resource: Resource) -> StateResource:
    """Convert a provisioner resource to its state file form."""
    return StateResource(
        id=resource.id,
        type=resource.type,
        physical_id=resource.physical_id,
        region=resource.region,
        attributes=resource.properties,
        tags=resource.tags,
    )


def from_state_resource(resource: StateResource) -> Resource:
    """Convert a state file resource back to a provisioner resource."""
    return Resource(
        id=resource.id,
        type=resource.type,
        physical_id=resource.physical_id,
        properties=dict(resource.attributes),
        region=resource.region,
        tags=list(resource.tags),
    )


class Provider:
    """Registers the Networking types and runs their operations.

    Every operation returns a :class:`Result`; failures are reported as
    diagnostics rather than raised.
    """

    def __init__(
        self,
        config: ProviderConfig,
        client_manager: Optional[OpenStackClientManager] = None,
        sleep=time.sleep
    ):
        self.config = config
        self.client_manager = client_manager or OpenStackClientManager(config)
        self._sleep = sleep
        self._provisioners: Dict[str, BaseProvisioner] = {}

    @staticmethod
    def data_source_types() -> List[str]:
        return sorted(DATA_SOURCES)

    @staticmethod
    def resource_types() -> List[str]:
        return sorted(RESOURCES)

    def read_data_source(
        self, type_name: str, args: Mapping[str, Any], address: Optional[str] = None
    ) -> Result:
        """Run a data source lookup.

        Args:
            type_name: Registered data source type
            args: Raw arguments
            address: Block address used in diagnostics

        Returns:
            Result with the matched object's attributes, or diagnostics
        """
        context = ErrorContext(resource_id=address, resource_type=type_name, operation='read')
        data_source_cls = DATA_SOURCES.get(type_name)
        if data_source_cls is None:
            return self._unknown_type(type_name, context, DATA_SOURCES)

        start_time = time.monotonic()
        try:
            with LogContext(logger, resource_id=address, resource_type=type_name, operation='read'):
                found = data_source_cls(self.client_manager).read(args)
        except HANDLED_ERRORS as e:
            return self._failure(e, context)

        logger.info(
            f"Read {type_name} {found.id}",
            extra={'resource_id': address, 'duration': time.monotonic() - start_time}
        )
        return Result(attributes=found.attributes, physical_id=found.id)

    def plan_resource(
        self,
        type_name: str,
        address: str,
        args: Mapping[str, Any],
        prior: Optional[Resource] = None
    ) -> Result:
        """Compare desired arguments with the prior state.

        Args:
            type_name: Registered resource type
            address: Resource address
            args: Raw arguments
            prior: Refreshed state of the resource, if it exists

        Returns:
            Result whose ``plan`` holds the change to make
        """
        context = ErrorContext(resource_id=address, resource_type=type_name, operation='plan')
        if type_name not in RESOURCES:
            return self._unknown_type(type_name, context, RESOURCES)

        try:
            provisioner = self._provisioner(type_name)
            desired = provisioner.desired_resource(address, args)
            plan = provisioner.plan(desired, prior)
        except HANDLED_ERRORS as e:
            return self._failure(e, context)

        logger.debug(
            f"Planned {address}: {plan.change_type.value} {plan.changed_attributes}"
        )
        return Result(
            attributes=dict(prior.properties) if prior else {},
            physical_id=prior.physical_id if prior else None,
            plan=plan,
            resource=prior,
        )

    def apply(self, plan: ProvisionPlan) -> Result:
        """Execute a plan produced by :meth:`plan_resource`."""
        resource = plan.resource
        context = ErrorContext(
            resource_id=resource.id,
            resource_type=resource.type,
            operation=plan.change_type.value,
            region=resource.region,
        )
        if resource.type not in RESOURCES:
            return self._unknown_type(resource.type, context, RESOURCES)

        if plan.change_type == ChangeType.DELETE:
            return self.destroy(plan.current_state or resource)

        start_time = time.monotonic()
        try:
            with LogContext(logger, resource_id=resource.id, operation=plan.change_type.value):
                applied = self._provisioner(resource.type).provision(plan)
        except HANDLED_ERRORS as e:
            return self._failure(e, context)

        logger.info(
            f"Applied {plan.change_type.value} to {resource.id}",
            extra={'resource_id': resource.id, 'duration': time.monotonic() - start_time}
        )
        return Result(
            attributes=applied.properties,
            physical_id=applied.physical_id,
            resource=applied,
        )

    def refresh(self, resource: Resource) -> Result:
        """Re-read a managed resource.

        A resource that no longer exists comes back with no physical_id and a
        warning, so the caller can drop it from state.
        """
        context = ErrorContext(
            resource_id=resource.id,
            resource_type=resource.type,
            operation='refresh',
            region=resource.region,
        )
        if resource.type not in RESOURCES:
            return self._unknown_type(resource.type, context, RESOURCES)

        try:
            current = self._provisioner(resource.type).get_current_state(resource)
        except HANDLED_ERRORS as e:
            return self._failure(e, context)

        if current is None:
            logger.warning(f"{resource.id} ({resource.physical_id}) no longer exists")
            return Result(diagnostics=[Diagnostic(
                severity=ErrorSeverity.WARNING,
                summary=f"{resource.id} was deleted outside of neutron-deploy",
                address=resource.id,
                suggestions=['It will be removed from state and created again on the next apply'],
            )])

        return Result(
            attributes=current.properties,
            physical_id=current.physical_id,
            resource=current,
        )

    def destroy(self, resource: Resource) -> Result:
        """Delete a managed resource and wait until it is gone."""
        context = ErrorContext(
            resource_id=resource.id,
            resource_type=resource.type,
            operation='delete',
            region=resource.region,
        )
        if resource.type not in RESOURCES:
            return self._unknown_type(resource.type, context, RESOURCES)

        start_time = time.monotonic()
        try:
            with LogContext(logger, resource_id=resource.id, operation='delete'):
                self._provisioner(resource.type).destroy(resource)
        except HANDLED_ERRORS as e:
            return self._failure(e, context)

        logger.info(
            f"Destroyed {resource.id}",
            extra={'resource_id': resource.id, 'duration': time.monotonic() - start_time}
        )
        return Result()

    def close(self) -> None:
        """Close cached OpenStack connections."""
        self.client_manager.close()

    def _provisioner(self, type_name: str) -> BaseProvisioner:
        if type_name not in self._provisioners:
            self._provisioners[type_name] = RESOURCES[type_name](
                self.client_manager, sleep=self._sleep
            )
        return self._provisioners[type_name]

    def _failure(self, error: Exception, context: ErrorContext) -> Result:
        provider_error = error_handler.handle_exception(error, context)
        error_handler.log_error(provider_error)
        return Result(diagnostics=[provider_error.to_diagnostic()])

    def _unknown_type(self, type_name: str, context: ErrorContext, registry: Dict) -> Result:
        error = ConfigurationError(
            f"Unsupported type: {type_name}",
            context=context,
            suggestions=[f"Supported types: {', '.join(sorted(registry))}"]
        )
        return self._failure(error, context)
