"""YAML configuration parser for neutron-deploy."""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from neutron_deploy.schema import DATA_SOURCE_SCHEMAS, RESOURCE_SCHEMAS

from .models import DataSourceConfig, ProjectConfig, ProviderConfig, ResourceConfig


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, errors: Optional[List[Dict]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)

    def __str__(self) -> str:
        """Format validation errors for display."""
        if not self.errors:
            return self.message

        error_lines = [self.message, ""]
        for error in self.errors:
            location = " -> ".join(str(loc) for loc in error.get("loc", []))
            msg = error.get("msg", "Unknown error")
            error_lines.append(f"  - {location}: {msg}")

        return "\n".join(error_lines)


class Config:
    """Configuration manager for neutron-deploy."""

    def __init__(self, config_path: str):
        """Initialize configuration manager.

        Args:
            config_path: Path to neutron.yaml configuration file
        """
        self.config_path = Path(config_path)
        self.data: Dict = {}
        self.workspace: str = "default"
        self.provider: ProviderConfig = ProviderConfig()
        self.data_sources: List[DataSourceConfig] = []
        self.resources: List[ResourceConfig] = []

    def load(self) -> "Config":
        """Load and validate configuration from YAML file.

        Returns:
            Self for method chaining

        Raises:
            ConfigValidationError: If configuration is invalid
            FileNotFoundError: If configuration file doesn't exist
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r") as f:
                self.data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Failed to parse YAML: {e}")

        if not isinstance(self.data, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        validation_errors = self.validate()
        if validation_errors:
            raise ConfigValidationError(
                f"Configuration validation failed with {len(validation_errors)} error(s)",
                validation_errors,
            )

        project = ProjectConfig(**self.data)
        self.workspace = project.workspace
        self.provider = project.provider
        self.data_sources = project.data
        self.resources = project.resources

        return self

    def validate(self) -> List[Dict]:
        """Validate configuration against schema.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        try:
            ProjectConfig(**self.data)
        except ValidationError as e:
            for error in e.errors():
                errors.append({"loc": list(error["loc"]), "msg": error["msg"]})
            return errors
        except TypeError as e:
            return [{"loc": [], "msg": str(e)}]

        errors.extend(self._validate_blocks("data", DataSourceConfig, DATA_SOURCE_SCHEMAS))
        errors.extend(self._validate_blocks("resources", ResourceConfig, RESOURCE_SCHEMAS))

        return errors

    def _validate_blocks(self, section: str, block_cls, schemas: Dict) -> List[Dict]:
        """Check type names, argument schemas and address uniqueness of a section."""
        errors = []
        seen = set()

        for idx, block_data in enumerate(self.data.get(section) or []):
            block = block_cls(**block_data)

            if block.address in seen:
                errors.append({
                    "loc": [section, idx, "name"],
                    "msg": f"Duplicate address '{block.address}'",
                })
            seen.add(block.address)

            schema = schemas.get(block.type)
            if schema is None:
                errors.append({
                    "loc": [section, idx, "type"],
                    "msg": f"Unsupported type '{block.type}'. "
                           f"Supported: {', '.join(sorted(schemas))}",
                })
                continue

            try:
                schema(**block.args)
            except ValidationError as e:
                for error in e.errors():
                    errors.append({
                        "loc": [section, idx, "args"] + list(error["loc"]),
                        "msg": error["msg"],
                    })

        return errors

    def get_data_source(self, address: str) -> Optional[DataSourceConfig]:
        """Get a data source block by ``<type>.<name>`` address."""
        for block in self.data_sources:
            if block.address == address:
                return block
        return None

    def get_resource(self, address: str) -> Optional[ResourceConfig]:
        """Get a resource block by ``<type>.<name>`` address."""
        for block in self.resources:
            if block.address == address:
                return block
        return None

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return {
            "workspace": self.workspace,
            "provider": self.provider.model_dump(exclude={"password"}),
            "data": [block.model_dump() for block in self.data_sources],
            "resources": [block.model_dump() for block in self.resources],
        }
