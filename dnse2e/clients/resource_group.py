"""Resource groups: create with a delete-after policy, or load from an id."""

import logging
import time
from dataclasses import dataclass

from azure.mgmt.resource.resources.models import ResourceGroup as ResourceGroupParams

from dnse2e.clients.arm import arm_call
from dnse2e.clients.resource_id import parse_resource_id

logger = logging.getLogger(__name__)

DEFAULT_DELETE_AFTER = 2 * 60 * 60


@dataclass(frozen=True)
class ResourceGroup:
    id: str
    name: str


def delete_after_tags(seconds, now=None):
    """Tags that let the subscription's garbage collector remove the group.

    Returns:
        dict with ``deletion_marked_by`` and ``deletion_due_time`` (unix seconds).
    """
    now = time.time() if now is None else now
    return {"deletion_marked_by": "gc", "deletion_due_time": str(int(now + seconds))}


async def new_resource_group(resources, name, location, delete_after=DEFAULT_DELETE_AFTER, tags=None):
    """Create (or update) a resource group.

    Args:
        resources: ``ResourceManagementClient`` for the target subscription.
        delete_after: seconds until the group is due for deletion, or None
            to skip the deletion tags.
    """
    logger.info(f"Creating resource group '{name}' in {location}...")
    all_tags = dict(tags or {})
    if delete_after:
        all_tags.update(delete_after_tags(delete_after))

    result = await arm_call(
        f"create resource group {name}",
        resources.resource_groups.create_or_update(name, ResourceGroupParams(location=location, tags=all_tags)),
    )
    rg = ResourceGroup(id=result.id, name=result.name)
    logger.info(f"Resource group '{rg.name}' ready.")
    return rg


def load_resource_group(rid: str) -> ResourceGroup:
    """Rebuild a ResourceGroup handle from its resource id."""
    return ResourceGroup(id=rid, name=parse_resource_id(rid).resource_group)
