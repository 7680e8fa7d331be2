"""ARM resource id parsing.

Ids look like::

    /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}[/{child type}/{child name}...]

Resource group ids stop after ``resourceGroups/{rg}``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceId:
    """Parsed ARM resource id."""

    subscription_id: str
    resource_group: str
    provider: str = ""
    resource_type: str = ""
    resource_name: str = ""
    children: tuple[tuple[str, str], ...] = ()

    @property
    def name(self) -> str:
        """Name of the innermost resource (the resource group for rg ids)."""
        if self.children:
            return self.children[-1][1]
        return self.resource_name or self.resource_group

    def __str__(self) -> str:
        rid = f"/subscriptions/{self.subscription_id}/resourceGroups/{self.resource_group}"
        if not self.provider:
            return rid
        rid += f"/providers/{self.provider}/{self.resource_type}/{self.resource_name}"
        for child_type, child_name in self.children:
            rid += f"/{child_type}/{child_name}"
        return rid


def parse_resource_id(rid: str) -> ResourceId:
    """Parse an ARM resource id string.

    Raises:
        ValueError: if *rid* is not a subscription-and-resource-group scoped id.
    """
    parts = [p for p in rid.strip().split("/") if p]
    if len(parts) < 4 or parts[0].lower() != "subscriptions" or parts[2].lower() != "resourcegroups":
        raise ValueError(f"invalid resource id '{rid}'")

    subscription_id, resource_group = parts[1], parts[3]
    rest = parts[4:]
    if not rest:
        return ResourceId(subscription_id=subscription_id, resource_group=resource_group)

    if rest[0].lower() != "providers" or len(rest) < 4 or len(rest) % 2 != 0:
        raise ValueError(f"invalid resource id '{rid}'")

    children = tuple((rest[i], rest[i + 1]) for i in range(4, len(rest), 2))
    return ResourceId(
        subscription_id=subscription_id,
        resource_group=resource_group,
        provider=rest[1],
        resource_type=rest[2],
        resource_name=rest[3],
        children=children,
    )
