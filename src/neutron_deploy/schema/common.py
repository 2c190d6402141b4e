"""Shared pieces of the attribute schemas."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from neutron_deploy.tagging.tags import validate_tags


class Arguments(BaseModel):
    """Base for user-supplied arguments. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    region: Optional[str] = Field(None, description="Region override for this block")
    tags: List[str] = Field(default_factory=list, description="Tags the object must carry")

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: List[str]) -> List[str]:
        """Validate tag values; order is not significant."""
        return validate_tags(v)


class Attributes(BaseModel):
    """Base for attributes written to state after a read."""

    id: str = Field(..., description="OpenStack UUID")
    region: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    all_tags: List[str] = Field(default_factory=list)
