"""Pydantic models for configuration schema."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

# Block names become part of state addresses (<type>.<name>)
NAME_PATTERN = "^[A-Za-z_][A-Za-z0-9_-]*$"


class ProviderConfig(BaseModel):
    """Provider-wide connection settings."""

    cloud: Optional[str] = Field(None, description="Entry in clouds.yaml (default: OS_CLOUD)")
    region: Optional[str] = Field(None, description="Default region (default: OS_REGION_NAME)")
    auth_url: Optional[str] = Field(None, description="Identity v3 endpoint")
    username: Optional[str] = None
    password: Optional[str] = None
    project_name: Optional[str] = None
    user_domain_name: str = "Default"
    project_domain_name: str = "Default"
    interface: Optional[str] = Field(None, pattern="^(public|internal|admin)$")
    insecure: bool = False

    @model_validator(mode="after")
    def validate_auth(self):
        """Validate that one authentication method is configured."""
        if self.cloud and self.auth_url:
            raise ValueError(
                "Cannot specify both 'cloud' and 'auth_url' - choose one authentication method"
            )
        if self.auth_url:
            missing = [
                key for key in ("username", "password", "project_name")
                if not getattr(self, key)
            ]
            if missing:
                raise ValueError(
                    f"{', '.join(missing)} required when auth_url is set"
                )
        return self


class BlockConfig(BaseModel):
    """A declared data source or resource."""

    type: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=64, pattern=NAME_PATTERN)
    args: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def default_args(cls, v: Any) -> Any:
        """An empty ``args:`` key in YAML loads as None."""
        return {} if v is None else v

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"


class DataSourceConfig(BlockConfig):
    """A declared data source lookup."""


class ResourceConfig(BlockConfig):
    """A declared managed resource."""


class ProjectConfig(BaseModel):
    """Top-level document layout."""

    workspace: str = Field("default", min_length=1, max_length=64, pattern=NAME_PATTERN)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    data: List[DataSourceConfig] = Field(default_factory=list)
    resources: List[ResourceConfig] = Field(default_factory=list)
