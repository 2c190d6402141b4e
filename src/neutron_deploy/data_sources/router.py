"""Router lookup."""

from typing import Any, Dict, Optional

from neutron_deploy.schema import ROUTER_V2
from neutron_deploy.schema.router import (
    ExternalFixedIP,
    RouterAttributes,
    RouterDataSourceArgs,
    RouterRoute,
)
from neutron_deploy.tagging.tags import remote_tags, tags_filter

from .base import BaseDataSource


class RouterDataSource(BaseDataSource):
    """Finds exactly one router by filter and exposes its gateway and routes."""

    type_name = ROUTER_V2
    args_model = RouterDataSourceArgs

    list_error = "Unable to list Routers"
    no_results_message = "No Router found"
    multiple_results_message = "More than one Router found"

    def build_query(self, params: RouterDataSourceArgs) -> Dict[str, Any]:
        query: Dict[str, Any] = {}

        if params.router_id:
            query['id'] = params.router_id
        if params.name:
            query['name'] = params.name
        if params.description:
            query['description'] = params.description

        # An explicit false is a filter too
        if params.admin_state_up is not None:
            query['is_admin_state_up'] = params.admin_state_up
        if params.distributed is not None:
            query['is_distributed'] = params.distributed

        if params.status:
            query['status'] = params.status
        if params.tenant_id:
            query['project_id'] = params.tenant_id

        tags = tags_filter(params.tags)
        if tags:
            query['tags'] = tags

        return query

    def list_objects(self, network, query: Dict[str, Any]):
        return network.routers(**query)

    def to_attributes(
        self, obj: Any, params: RouterDataSourceArgs, region: Optional[str]
    ) -> RouterAttributes:
        gateway = obj.external_gateway_info or {}

        external_fixed_ips = [
            ExternalFixedIP(
                subnet_id=ip.get('subnet_id') or '',
                ip_address=ip.get('ip_address') or '',
            )
            for ip in gateway.get('external_fixed_ips') or []
        ]

        return RouterAttributes(
            id=obj.id,
            region=region,
            name=obj.name or '',
            description=obj.description or '',
            admin_state_up=obj.is_admin_state_up,
            distributed=obj.is_distributed,
            status=obj.status or '',
            tenant_id=obj.project_id or '',
            external_network_id=gateway.get('network_id') or '',
            enable_snat=gateway.get('enable_snat'),
            external_qos_policy_id=gateway.get('qos_policy_id') or '',
            external_fixed_ip=external_fixed_ips,
            routes=expand_routes(obj.routes),
            availability_zone_hints=list(obj.availability_zone_hints or []),
            tags=params.tags,
            all_tags=remote_tags(obj),
        )


def expand_routes(routes) -> list:
    """Convert API routes (``destination``/``nexthop``) to state routes."""
    return [
        RouterRoute(
            destination_cidr=route.get('destination', ''),
            next_hop=route.get('nexthop', ''),
        )
        for route in routes or []
    ]
