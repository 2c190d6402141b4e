"""Read-only lookups of Networking objects."""

from .base import BaseDataSource, DataSourceResult
from .router import RouterDataSource
from .subnet_pool import SubnetPoolDataSource
from .trunk import TrunkDataSource

__all__ = [
    'BaseDataSource',
    'DataSourceResult',
    'RouterDataSource',
    'SubnetPoolDataSource',
    'TrunkDataSource',
]
