"""Azure clients: management SDK access, resource creation, cluster run-command."""

from dnse2e.clients.resource_id import ResourceId, parse_resource_id
from dnse2e.clients.aks import (
    CLUSTER_OPTIONS,
    OSM_CLUSTER_OPT,
    PRIVATE_CLUSTER_OPT,
    Aks,
    ClusterOption,
    apply_manifests,
    get_cluster,
    load_aks,
    new_aks,
)
from dnse2e.clients.arm import ArmClients, arm_call, long_running
from dnse2e.clients.azure import Azure
from dnse2e.clients.credential import CredentialProvider
from dnse2e.clients.dns import PrivateZone, Zone, link_vnet, load_private_zone, load_zone, new_private_zone, new_zone
from dnse2e.clients.resource_group import ResourceGroup, load_resource_group, new_resource_group
from dnse2e.clients.roles import (
    DNS_CONTRIBUTOR_ROLE,
    NETWORK_CONTRIBUTOR_ROLE,
    PRIVATE_DNS_CONTRIBUTOR_ROLE,
    Role,
    assign_role,
)
from dnse2e.clients.run_command import CommandResult, RemoteCommandChannel
from dnse2e.clients.vnet import VirtualNetwork, new_vnet

__all__ = [
    "ResourceId",
    "parse_resource_id",
    "CLUSTER_OPTIONS",
    "OSM_CLUSTER_OPT",
    "PRIVATE_CLUSTER_OPT",
    "Aks",
    "ClusterOption",
    "apply_manifests",
    "get_cluster",
    "load_aks",
    "new_aks",
    "ArmClients",
    "arm_call",
    "long_running",
    "Azure",
    "CredentialProvider",
    "PrivateZone",
    "Zone",
    "link_vnet",
    "load_private_zone",
    "load_zone",
    "new_private_zone",
    "new_zone",
    "ResourceGroup",
    "load_resource_group",
    "new_resource_group",
    "DNS_CONTRIBUTOR_ROLE",
    "NETWORK_CONTRIBUTOR_ROLE",
    "PRIVATE_DNS_CONTRIBUTOR_ROLE",
    "Role",
    "assign_role",
    "CommandResult",
    "RemoteCommandChannel",
    "VirtualNetwork",
    "new_vnet",
]
