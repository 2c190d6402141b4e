"""Subnet pool provisioner."""

from typing import Any, Dict, List, Optional

from neutron_deploy.schema import SUBNETPOOL_V2
from neutron_deploy.schema.subnet_pool import (
    DEFAULT_TIMEOUT,
    SubnetPoolArgs,
    SubnetPoolAttributes,
)
from neutron_deploy.tagging.tags import replace_tags
from neutron_deploy.utils.errors import is_not_found
from neutron_deploy.utils.logging import get_logger
from neutron_deploy.utils.waiter import (
    STATE_ACTIVE,
    STATE_DELETED,
    StateWaiter,
    existence_refresh,
)

from .base import BaseProvisioner, Resource, ProvisionPlan, ChangeType

logger = get_logger(__name__)

# Argument name -> SDK attribute name for attributes updatable in place
UPDATABLE_ATTRIBUTES = {
    'name': 'name',
    'description': 'description',
    'default_quota': 'default_quota',
    'default_prefixlen': 'default_prefix_length',
    'min_prefixlen': 'minimum_prefix_length',
    'max_prefixlen': 'maximum_prefix_length',
    'address_scope_id': 'address_scope_id',
    'prefixes': 'prefixes',
    'is_default': 'is_default',
}

# Create-only attributes; a change forces a new pool
FORCE_NEW_ATTRIBUTES = {
    'project_id': 'project_id',
    'shared': 'is_shared',
}


class SubnetPoolProvisioner(BaseProvisioner):
    """Provisioner for Networking subnet pools."""

    type_name = SUBNETPOOL_V2

    def desired_resource(self, address: str, args: Dict[str, Any]) -> Resource:
        """Validate arguments and build the desired resource.

        Raises:
            pydantic.ValidationError: If the arguments do not fit the schema
        """
        params = SubnetPoolArgs(**args)
        return Resource(
            id=address,
            type=self.type_name,
            physical_id=None,
            properties=params.model_dump(exclude_none=True),
            region=self.client_manager.get_region(args),
            tags=list(params.tags),
        )

    def plan(self, desired: Resource, current: Optional[Resource]) -> ProvisionPlan:
        """Determine what changes are needed for the subnet pool.

        Args:
            desired: Desired subnet pool state
            current: Current subnet pool state (None if doesn't exist)

        Returns:
            ProvisionPlan with change type and changed attribute names
        """
        if current is None:
            return ProvisionPlan(
                resource=desired,
                change_type=ChangeType.CREATE,
                current_state=None
            )

        desired.physical_id = current.physical_id

        replace = self._force_new_changes(desired, current)
        if replace:
            return ProvisionPlan(
                resource=desired,
                change_type=ChangeType.REPLACE,
                current_state=current,
                changed_attributes=replace
            )

        changed = self._updatable_changes(desired, current)
        if changed:
            return ProvisionPlan(
                resource=desired,
                change_type=ChangeType.UPDATE,
                current_state=current,
                changed_attributes=changed
            )

        return ProvisionPlan(
            resource=desired,
            change_type=ChangeType.NO_CHANGE,
            current_state=current
        )

    def provision(self, plan: ProvisionPlan) -> Resource:
        """Execute the subnet pool provisioning plan.

        Args:
            plan: Provisioning plan to execute

        Returns:
            Resource with physical_id set to the pool ID and attributes read back
        """
        if plan.change_type == ChangeType.CREATE:
            return self._create_subnet_pool(plan.resource)
        elif plan.change_type == ChangeType.UPDATE:
            return self._update_subnet_pool(plan)
        elif plan.change_type == ChangeType.REPLACE:
            self.destroy(plan.current_state)
            return self._create_subnet_pool(plan.resource)
        else:
            return plan.current_state or plan.resource

    def destroy(self, resource: Resource) -> None:
        """Delete the subnet pool and wait until it is gone.

        Args:
            resource: Subnet pool resource to destroy
        """
        pool_id = resource.physical_id
        if not pool_id:
            return

        network = self.network(resource.region)
        network.delete_subnet_pool(pool_id, ignore_missing=True)
        logger.info(f"Deleting subnet pool {pool_id}")

        StateWaiter(
            existence_refresh(lambda: network.get_subnet_pool(pool_id)),
            target=[STATE_DELETED],
            pending=[STATE_ACTIVE],
            timeout=self._timeout(resource, 'delete'),
            sleep=self._sleep,
        ).wait()
        logger.info(f"Deleted subnet pool {pool_id}")

    def get_current_state(self, resource: Resource) -> Optional[Resource]:
        """Fetch current subnet pool state from OpenStack.

        Args:
            resource: Resource carrying the pool ID in physical_id

        Returns:
            Current resource state or None if the pool is gone
        """
        if not resource.physical_id:
            return None

        network = self.network(resource.region)
        try:
            pool = network.get_subnet_pool(resource.physical_id)
        except Exception as e:
            if is_not_found(e):
                logger.info(f"Subnet pool {resource.physical_id} not found")
                return None
            raise

        return self._to_resource(resource, pool)

    def _create_subnet_pool(self, resource: Resource) -> Resource:
        """Create a subnet pool, wait for it, and tag it.

        Args:
            resource: Desired resource

        Returns:
            Resource with physical_id and attributes set
        """
        props = resource.properties
        network = self.network(resource.region)

        attrs: Dict[str, Any] = {}
        for arg_name, sdk_name in {**UPDATABLE_ATTRIBUTES, **FORCE_NEW_ATTRIBUTES}.items():
            if props.get(arg_name) is not None:
                attrs[sdk_name] = props[arg_name]
        attrs.update(props.get('value_specs') or {})

        logger.debug(f"Create options: {attrs}")
        pool = network.create_subnet_pool(**attrs)
        logger.info(f"Created subnet pool {pool.id}")

        pool = StateWaiter(
            existence_refresh(lambda: network.get_subnet_pool(pool.id)),
            target=[STATE_ACTIVE],
            pending=[STATE_DELETED],
            timeout=self._timeout(resource, 'create'),
            sleep=self._sleep,
        ).wait()

        if resource.tags:
            replace_tags(network, pool, resource.tags)
            pool = network.get_subnet_pool(pool.id)

        resource.physical_id = pool.id
        return self._to_resource(resource, pool)

    def _update_subnet_pool(self, plan: ProvisionPlan) -> Resource:
        """Send only the changed attributes, then read back.

        Args:
            plan: Plan with changed_attributes populated

        Returns:
            Updated resource
        """
        resource = plan.resource
        props = resource.properties
        network = self.network(resource.region)
        pool_id = plan.current_state.physical_id

        update_opts = {
            UPDATABLE_ATTRIBUTES[name]: props.get(name)
            for name in plan.changed_attributes
            if name in UPDATABLE_ATTRIBUTES
        }

        pool = None
        if update_opts:
            logger.debug(f"Updating subnet pool {pool_id} with options: {update_opts}")
            pool = network.update_subnet_pool(pool_id, **update_opts)

        if 'tags' in plan.changed_attributes:
            if pool is None:
                pool = network.get_subnet_pool(pool_id)
            current = plan.current_state
            foreign = set(current.properties.get('all_tags') or []) - set(self._managed_tags(current))
            replace_tags(network, pool, foreign.union(resource.tags))

        pool = network.get_subnet_pool(pool_id)
        resource.physical_id = pool.id
        return self._to_resource(resource, pool)

    def _force_new_changes(self, desired: Resource, current: Resource) -> List[str]:
        """Names of create-only attributes that differ."""
        changes = []
        if desired.region != current.region:
            changes.append('region')

        for name in FORCE_NEW_ATTRIBUTES:
            wanted = desired.properties.get(name)
            if wanted is not None and wanted != current.properties.get(name):
                changes.append(name)

        if (desired.properties.get('value_specs') or {}) != (current.properties.get('value_specs') or {}):
            changes.append('value_specs')

        return changes

    def _updatable_changes(self, desired: Resource, current: Resource) -> List[str]:
        """Names of in-place attributes that differ. Unset arguments never differ."""
        changes = []
        for name in UPDATABLE_ATTRIBUTES:
            wanted = desired.properties.get(name)
            if wanted is None:
                continue
            if wanted != current.properties.get(name):
                changes.append(name)

        if sorted(desired.tags) != self._managed_tags(current):
            changes.append('tags')

        return changes

    def _managed_tags(self, current: Resource) -> List[str]:
        """Previously configured tags that the pool still carries.

        Tags added outside of neutron-deploy are not part of the comparison.
        """
        remote = set(current.properties.get('all_tags') or [])
        return sorted(remote.intersection(current.properties.get('tags') or []))

    def _to_resource(self, resource: Resource, pool: Any) -> Resource:
        """Build the current resource from an SDK subnet pool."""
        attributes = SubnetPoolAttributes.from_sdk(
            pool,
            region=resource.region,
            tags=resource.properties.get('tags', resource.tags),
            value_specs=resource.properties.get('value_specs'),
        )
        properties = attributes.model_dump()
        properties['timeouts'] = resource.properties.get('timeouts') or {}
        return Resource(
            id=resource.id,
            type=self.type_name,
            physical_id=pool.id,
            properties=properties,
            region=resource.region,
            tags=list(attributes.all_tags),
        )

    def _timeout(self, resource: Resource, operation: str) -> float:
        timeouts = resource.properties.get('timeouts') or {}
        return float(timeouts.get(operation, DEFAULT_TIMEOUT))
