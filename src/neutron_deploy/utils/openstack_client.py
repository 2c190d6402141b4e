"""OpenStack connection management and region resolution."""

import os
from typing import Any, Dict, Mapping, Optional

import openstack
from openstack import connection

from neutron_deploy.config.models import ProviderConfig
from neutron_deploy.utils.errors import ConfigurationError
from neutron_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class OpenStackClientManager:
    """Manages one OpenStack connection per region."""

    def __init__(self, config: ProviderConfig):
        """Initialize client manager.

        Args:
            config: Provider-wide configuration (cloud, auth, default region)
        """
        self.config = config
        self._connections: Dict[str, connection.Connection] = {}

    @property
    def default_region(self) -> Optional[str]:
        return self.config.region or os.getenv('OS_REGION_NAME')

    def get_region(self, args: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """Resolve the region for a call.

        A non-empty ``region`` argument wins over the provider default.
        """
        if args:
            region = args.get('region')
            if region:
                return region
        return self.default_region

    def get_connection(self, region: Optional[str] = None) -> connection.Connection:
        """Get or create the connection for a region.

        Args:
            region: Region name (provider default when omitted)

        Returns:
            Cached openstack Connection
        """
        region = region or self.default_region
        cache_key = region or ''

        if cache_key in self._connections:
            return self._connections[cache_key]

        conn = self._connect(region)
        self._connections[cache_key] = conn
        logger.debug(f"Created OpenStack connection (region: {region or 'default'})")
        return conn

    def network_client(self, region: Optional[str] = None):
        """Get the Networking v2 proxy for a region."""
        try:
            return self.get_connection(region).network
        except openstack.exceptions.SDKException as e:
            raise ConfigurationError(
                f'Error creating OpenStack networking client: {e}',
                cause=e
            ) from e

    def _connect(self, region: Optional[str]) -> connection.Connection:
        """Open a new connection from clouds.yaml or explicit credentials."""
        cfg = self.config
        cloud = cfg.cloud or os.getenv('OS_CLOUD')

        common: Dict[str, Any] = {}
        if region:
            common['region_name'] = region
        if cfg.interface:
            common['interface'] = cfg.interface
        if cfg.insecure:
            common['verify'] = False

        if cloud:
            logger.info(f"Connecting to OpenStack cloud: {cloud}")
            return openstack.connect(cloud=cloud, **common)

        if not cfg.auth_url:
            raise ConfigurationError(
                'No OpenStack cloud configured',
                suggestions=[
                    'Set provider.cloud to a clouds.yaml entry or export OS_CLOUD',
                    'Or provide auth_url, username, password and project_name',
                ]
            )

        logger.info(f"Connecting to OpenStack at {cfg.auth_url}")
        return connection.Connection(
            auth_url=cfg.auth_url,
            username=cfg.username,
            password=cfg.password,
            project_name=cfg.project_name,
            user_domain_name=cfg.user_domain_name,
            project_domain_name=cfg.project_domain_name,
            **common
        )

    def close(self) -> None:
        """Close all cached connections."""
        for conn in self._connections.values():
            conn.close()
        self._connections.clear()
