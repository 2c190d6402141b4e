"""Configuration management for neutron-deploy."""

from .models import (
    BlockConfig,
    DataSourceConfig,
    ProjectConfig,
    ProviderConfig,
    ResourceConfig,
)
from .parser import Config, ConfigValidationError

__all__ = [
    "BlockConfig",
    "DataSourceConfig",
    "ProjectConfig",
    "ProviderConfig",
    "ResourceConfig",
    "Config",
    "ConfigValidationError",
]
