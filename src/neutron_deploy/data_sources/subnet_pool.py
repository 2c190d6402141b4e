"""Subnet pool lookup."""

from typing import Any, Dict, Optional

from neutron_deploy.schema import SUBNETPOOL_V2
from neutron_deploy.schema.subnet_pool import SubnetPoolAttributes, SubnetPoolDataSourceArgs
from neutron_deploy.tagging.tags import tags_filter

from .base import BaseDataSource

# Argument name -> SDK attribute name, for filters passed through unchanged
_FILTERS = {
    'name': 'name',
    'description': 'description',
    'default_quota': 'default_quota',
    'project_id': 'project_id',
    'default_prefixlen': 'default_prefix_length',
    'min_prefixlen': 'minimum_prefix_length',
    'max_prefixlen': 'maximum_prefix_length',
    'address_scope_id': 'address_scope_id',
    'ip_version': 'ip_version',
    'shared': 'is_shared',
    'is_default': 'is_default',
}


class SubnetPoolDataSource(BaseDataSource):
    """Finds exactly one subnet pool."""

    type_name = SUBNETPOOL_V2
    args_model = SubnetPoolDataSourceArgs

    list_error = "Unable to list Subnetpools"
    no_results_message = "No Subnetpool found"
    multiple_results_message = "More than one Subnetpool found"

    def build_query(self, params: SubnetPoolDataSourceArgs) -> Dict[str, Any]:
        query: Dict[str, Any] = {}

        for arg_name, sdk_name in _FILTERS.items():
            value = getattr(params, arg_name)
            if value is None or value == '':
                continue
            query[sdk_name] = value

        tags = tags_filter(params.tags)
        if tags:
            query['tags'] = tags

        return query

    def list_objects(self, network, query: Dict[str, Any]):
        return network.subnet_pools(**query)

    def to_attributes(
        self, obj: Any, params: SubnetPoolDataSourceArgs, region: Optional[str]
    ) -> SubnetPoolAttributes:
        return SubnetPoolAttributes.from_sdk(obj, region=region, tags=params.tags)
