"""Tag helpers for Networking resources."""

from neutron_deploy.tagging.tags import (
    remote_tags,
    replace_tags,
    tags_filter,
    validate_tags,
)

__all__ = ["remote_tags", "replace_tags", "tags_filter", "validate_tags"]
