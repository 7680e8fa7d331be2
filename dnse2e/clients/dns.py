"""Public and private DNS zones, and private zone virtual network links."""

import logging
from dataclasses import dataclass

from azure.mgmt.dns.models import Zone as ZoneParams
from azure.mgmt.privatedns.models import PrivateZone as PrivateZoneParams
from azure.mgmt.privatedns.models import SubResource, VirtualNetworkLink

from dnse2e.clients.arm import arm_call, long_running
from dnse2e.clients.resource_id import parse_resource_id

logger = logging.getLogger(__name__)

ZONE_LOCATION = "global"


@dataclass(frozen=True)
class Zone:
    """Public DNS zone."""

    id: str
    name: str
    nameservers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrivateZone:
    """Private DNS zone."""

    id: str
    name: str


async def new_zone(dns, resource_group, name):
    """Create a public DNS zone and return it with its assigned nameservers.

    Args:
        dns: ``DnsManagementClient`` for the target subscription.
    """
    logger.info(f"Creating DNS zone '{name}'...")
    result = await arm_call(
        f"create dns zone {name}",
        dns.zones.create_or_update(resource_group, name, ZoneParams(location=ZONE_LOCATION)),
    )
    zone = Zone(id=result.id, name=result.name, nameservers=tuple(result.name_servers or ()))
    logger.info(f"DNS zone '{zone.name}' ready ({len(zone.nameservers)} nameservers).")
    return zone


async def new_private_zone(private_dns, resource_group, name):
    """Create a private DNS zone (long-running)."""
    logger.info(f"Creating private DNS zone '{name}'...")
    result = await long_running(
        f"create private dns zone {name}",
        private_dns.private_zones.begin_create_or_update(resource_group, name, PrivateZoneParams(location=ZONE_LOCATION)),
    )
    zone = PrivateZone(id=result.id, name=result.name)
    logger.info(f"Private DNS zone '{zone.name}' ready.")
    return zone


async def link_vnet(private_dns, zone, link_name, vnet_id, registration_enabled=False):
    """Link a private zone to a virtual network so the vnet resolves its records."""
    logger.info(f"Linking private DNS zone '{zone.name}' to vnet via '{link_name}'...")
    link = VirtualNetworkLink(
        location=ZONE_LOCATION,
        virtual_network=SubResource(id=vnet_id),
        registration_enabled=registration_enabled,
    )
    await long_running(
        f"link private dns zone {zone.name}",
        private_dns.virtual_network_links.begin_create_or_update(
            parse_resource_id(zone.id).resource_group, zone.name, link_name, link
        ),
    )
    logger.info(f"Private DNS zone '{zone.name}' linked.")


def load_zone(rid, nameservers=()):
    return Zone(id=rid, name=parse_resource_id(rid).name, nameservers=tuple(nameservers))


def load_private_zone(rid):
    return PrivateZone(id=rid, name=parse_resource_id(rid).name)
