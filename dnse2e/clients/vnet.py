"""Virtual network + subnet creation for private-networked clusters."""

import logging
from dataclasses import dataclass

from azure.mgmt.network.models import AddressSpace, Subnet
from azure.mgmt.network.models import VirtualNetwork as VirtualNetworkParams

from dnse2e.clients.arm import long_running
from dnse2e.errors import ArmError

logger = logging.getLogger(__name__)

DEFAULT_VNET_NAME = "dnse2e-vnet"
DEFAULT_SUBNET_NAME = "dnse2e-subnet"

# Dual-stack so the IPv6 test service can get an address
VNET_ADDRESS_PREFIXES = ["fd00:db8:deca::/48", "10.1.0.0/16"]
SUBNET_ADDRESS_PREFIXES = ["fd00:db8:deca:deed::/64", "10.1.0.0/24"]


@dataclass(frozen=True)
class VirtualNetwork:
    vnet_id: str
    subnet_id: str

    @property
    def name(self) -> str:
        return self.vnet_id.rsplit("/", 1)[-1]


def vnet_request(location, subnet_name=DEFAULT_SUBNET_NAME):
    return VirtualNetworkParams(
        location=location,
        address_space=AddressSpace(address_prefixes=VNET_ADDRESS_PREFIXES),
        subnets=[Subnet(name=subnet_name, address_prefixes=SUBNET_ADDRESS_PREFIXES)],
    )


async def new_vnet(network, resource_group, location, name=DEFAULT_VNET_NAME, subnet_name=DEFAULT_SUBNET_NAME):
    """Create a virtual network together with its subnet.

    Args:
        network: ``NetworkManagementClient`` for the target subscription.

    Returns:
        VirtualNetwork with both resource ids.
    """
    logger.info(f"Creating virtual network '{name}' with subnet '{subnet_name}'...")
    operation = f"create vnet {name}"
    result = await long_running(
        operation,
        network.virtual_networks.begin_create_or_update(resource_group, name, vnet_request(location, subnet_name)),
    )

    subnet = next((s for s in result.subnets or [] if s.name == subnet_name), None)
    if subnet is None:
        raise ArmError(f"{operation}: subnet '{subnet_name}' missing from response", operation=operation)

    logger.info(f"Virtual network '{name}' ready.")
    return VirtualNetwork(vnet_id=result.id, subnet_id=subnet.id)
