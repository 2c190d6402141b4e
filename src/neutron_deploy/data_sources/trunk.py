"""Trunk lookup."""

from typing import Any, Dict, List, Optional

from neutron_deploy.schema import TRUNK_V2
from neutron_deploy.schema.trunk import SubPort, TrunkAttributes, TrunkDataSourceArgs
from neutron_deploy.tagging.tags import remote_tags, tags_filter

from .base import BaseDataSource


class TrunkDataSource(BaseDataSource):
    """Finds exactly one trunk and flattens its sub-ports."""

    type_name = TRUNK_V2
    args_model = TrunkDataSourceArgs

    list_error = "Unable to retrieve trunks"
    no_results_message = (
        "Your query returned no results. "
        "Please change your search criteria and try again."
    )
    multiple_results_message = (
        "Your query returned more than one result. "
        "Please try a more specific search criteria"
    )

    def build_query(self, params: TrunkDataSourceArgs) -> Dict[str, Any]:
        query: Dict[str, Any] = {}

        if params.name:
            query['name'] = params.name
        if params.description:
            query['description'] = params.description
        if params.trunk_id:
            query['id'] = params.trunk_id
        if params.port_id:
            query['port_id'] = params.port_id
        if params.admin_state_up is not None:
            query['is_admin_state_up'] = params.admin_state_up
        if params.project_id:
            query['project_id'] = params.project_id
        if params.status:
            query['status'] = params.status

        tags = tags_filter(params.tags)
        if tags:
            query['tags'] = tags

        return query

    def list_objects(self, network, query: Dict[str, Any]):
        return network.trunks(**query)

    def to_attributes(
        self, obj: Any, params: TrunkDataSourceArgs, region: Optional[str]
    ) -> TrunkAttributes:
        return TrunkAttributes(
            id=obj.id,
            region=region,
            name=obj.name or '',
            description=obj.description or '',
            port_id=obj.port_id or '',
            admin_state_up=obj.is_admin_state_up,
            status=obj.status or '',
            project_id=obj.project_id or '',
            sub_port=flatten_sub_ports(obj.sub_ports),
            tags=params.tags,
            all_tags=remote_tags(obj),
        )


def flatten_sub_ports(sub_ports) -> List[SubPort]:
    """One entry per sub-port, in API order."""
    return [
        SubPort(
            port_id=sub_port['port_id'],
            segmentation_type=sub_port.get('segmentation_type') or '',
            segmentation_id=sub_port.get('segmentation_id') or 0,
        )
        for sub_port in sub_ports or []
    ]
