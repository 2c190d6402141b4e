"""Tag handling for Networking resources."""

from typing import Any, Iterable, List, Optional

from neutron_deploy.utils.logging import get_logger

logger = get_logger(__name__)

# Neutron limits tags to 255 characters and reserves ',' and '/'
MAX_TAG_LENGTH = 255
FORBIDDEN_TAG_CHARS = (',', '/')


def validate_tags(tags: Iterable[str]) -> List[str]:
    """Check tag values and return them de-duplicated and sorted.

    Raises:
        ValueError: If a tag is empty, too long, or contains a reserved character
    """
    result = set()
    for tag in tags:
        if not tag or not isinstance(tag, str):
            raise ValueError(f"Tag must be a non-empty string: {tag!r}")
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag exceeds {MAX_TAG_LENGTH} characters: {tag[:32]}...")
        for char in FORBIDDEN_TAG_CHARS:
            if char in tag:
                raise ValueError(f"Tag may not contain '{char}': {tag}")
        result.add(tag)
    return sorted(result)


def tags_filter(tags: Iterable[str]) -> Optional[str]:
    """Join tags into a list filter value (all tags must match)."""
    tags = list(tags)
    if not tags:
        return None
    return ','.join(tags)


def remote_tags(obj: Any) -> List[str]:
    """Tags reported by an SDK object, sorted."""
    return sorted(getattr(obj, 'tags', None) or [])


def replace_tags(network, obj: Any, tags: Iterable[str]) -> List[str]:
    """Replace every tag on a Networking object.

    Args:
        network: Networking v2 proxy
        obj: SDK object to tag
        tags: Complete new tag set

    Returns:
        The tags now set on the object
    """
    tags = sorted(set(tags))
    updated = network.set_tags(obj, tags)
    logger.debug(f"Set tags on {obj.id}: {tags}")
    return remote_tags(updated) if updated is not None else tags
