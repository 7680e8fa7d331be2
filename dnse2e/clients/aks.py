"""AKS managed clusters: create, load from a snapshot, inspect, apply manifests."""

import copy
import logging
from dataclasses import dataclass, field
from typing import Callable

from azure.mgmt.containerservice.models import (
    ContainerServiceNetworkProfile,
    ManagedCluster,
    ManagedClusterAddonProfile,
    ManagedClusterAgentPoolProfile,
    ManagedClusterAPIServerAccessProfile,
    ManagedClusterIdentity,
)

from dnse2e.clients.arm import arm_call, long_running
from dnse2e.clients.resource_id import parse_resource_id
from dnse2e.errors import ArmError, ConfigError
from dnse2e.manifests.common import obj_ref
from dnse2e.manifests.package import encode_payload, package

logger = logging.getLogger(__name__)

DNS_PREFIX = "dnse2e"
VM_SIZE = "Standard_DS3_v2"
NODE_COUNT = 2


# ── Cluster options ───────────────────────────────────────────────


@dataclass(frozen=True)
class ClusterOption:
    """Named transformation of the managed cluster request.

    ``apply`` takes a ``ManagedCluster`` and returns a new one; it must not
    mutate its argument.
    """

    name: str
    apply: Callable[[ManagedCluster], ManagedCluster] = field(compare=False)


def _private_cluster(mc):
    mc = copy.deepcopy(mc)
    if mc.api_server_access_profile is None:
        mc.api_server_access_profile = ManagedClusterAPIServerAccessProfile()
    mc.api_server_access_profile.enable_private_cluster = True
    return mc


def _osm_cluster(mc):
    mc = copy.deepcopy(mc)
    mc.addon_profiles = dict(mc.addon_profiles or {})
    mc.addon_profiles["openServiceMesh"] = ManagedClusterAddonProfile(enabled=True)
    return mc


PRIVATE_CLUSTER_OPT = ClusterOption("private cluster", _private_cluster)
OSM_CLUSTER_OPT = ClusterOption("osm cluster", _osm_cluster)

CLUSTER_OPTIONS = {opt.name: opt for opt in (PRIVATE_CLUSTER_OPT, OSM_CLUSTER_OPT)}


def resolve_cluster_options(names):
    """Map option names to ClusterOption objects, preserving order."""
    options = []
    for name in names:
        if name not in CLUSTER_OPTIONS:
            raise ConfigError(f"unknown cluster option '{name}' (known: {', '.join(sorted(CLUSTER_OPTIONS))})")
        options.append(CLUSTER_OPTIONS[name])
    return options


# ── Cluster handle ────────────────────────────────────────────────


@dataclass(frozen=True)
class Aks:
    """Provisioned managed cluster. Identity fields never change after creation."""

    id: str
    name: str
    resource_group: str
    subscription_id: str
    location: str
    dns_service_ip: str
    principal_id: str
    client_id: str
    options: frozenset[str] = frozenset()


def _truncate(s, n):
    return s[:n]


def cluster_request(location, subnet_id, name):
    """Base managed cluster request before options are applied."""
    return ManagedCluster(
        location=location,
        identity=ManagedClusterIdentity(type="SystemAssigned"),
        dns_prefix=DNS_PREFIX,
        node_resource_group=_truncate("MC_" + name, 80),
        agent_pool_profiles=[
            ManagedClusterAgentPoolProfile(
                name="default",
                vm_size=VM_SIZE,
                count=NODE_COUNT,
                mode="System",
                vnet_subnet_id=subnet_id,
            )
        ],
        addon_profiles={
            "azureKeyvaultSecretsProvider": ManagedClusterAddonProfile(
                enabled=True,
                config={"enableSecretRotation": "true"},
            )
        },
        network_profile=ContainerServiceNetworkProfile(network_plugin="kubenet", ip_families=["IPv4", "IPv6"]),
    )


def apply_cluster_options(mc, options):
    """Apply *options* in order. Returns ``(request, applied_names)``."""
    applied = set()
    for opt in options:
        try:
            mc = opt.apply(mc)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"applying cluster option '{opt.name}': {e}") from e
        applied.add(opt.name)
    return mc, frozenset(applied)


def _cluster_from_result(result, subscription_id, resource_group, location, options):
    if not result.id or not result.name:
        raise ArmError("managed cluster id or name missing from response")
    dns_service_ip = result.network_profile.dns_service_ip if result.network_profile else None
    if not dns_service_ip:
        raise ArmError("managed cluster dns service ip missing from response")
    identity = (result.identity_profile or {}).get("kubeletidentity")
    if identity is None:
        raise ArmError("managed cluster kubelet identity not found")
    if not identity.object_id or not identity.client_id:
        raise ArmError("managed cluster kubelet identity is missing its object id or client id")

    return Aks(
        id=result.id,
        name=result.name,
        resource_group=resource_group,
        subscription_id=subscription_id,
        location=location,
        dns_service_ip=dns_service_ip,
        principal_id=identity.object_id,
        client_id=identity.client_id,
        options=options,
    )


async def new_aks(containers, subscription_id, resource_group, name, location, subnet_id, options=()):
    """Create a managed cluster and resolve its kubelet identity.

    Args:
        containers: ``ContainerServiceClient`` for *subscription_id*.
        options: ClusterOption sequence applied to the request in order.

    Returns:
        Aks handle with principal/client ids from the kubelet identity.
    """
    log = logging.getLogger(f"{__name__}.{name}")
    mc, applied = apply_cluster_options(cluster_request(location, subnet_id, name), options)
    log.info(f"Creating AKS cluster '{name}' in {resource_group} ({location}), options: {sorted(applied) or 'none'}")

    result = await long_running(
        f"create aks {name}",
        containers.managed_clusters.begin_create_or_update(resource_group, name, mc),
    )

    cluster = _cluster_from_result(result, subscription_id, resource_group, location, applied)
    log.info(f"AKS cluster '{cluster.name}' ready (principal {cluster.principal_id}).")
    return cluster


def load_aks(rid, dns_service_ip, location, principal_id, client_id, options=()):
    """Rebuild an Aks handle from snapshot fields without calling ARM.

    *rid* is kept exactly as given; parsing only validates it.
    """
    parsed = parse_resource_id(rid)
    return Aks(
        id=rid,
        name=parsed.name,
        resource_group=parsed.resource_group,
        subscription_id=parsed.subscription_id,
        location=location,
        dns_service_ip=dns_service_ip,
        principal_id=principal_id,
        client_id=client_id,
        options=frozenset(options),
    )


async def get_cluster(containers, cluster):
    """Fetch the current ``ManagedCluster`` for *cluster*."""
    return await arm_call(
        f"get aks {cluster.name}",
        containers.managed_clusters.get(cluster.resource_group, cluster.name),
    )


async def apply_manifests(channel, cluster, objs):
    """``kubectl apply`` *objs* on *cluster* via a zipped run-command payload."""
    log = logging.getLogger(f"{__name__}.{cluster.name}")
    log.info(f"Applying {len(objs)} manifests: {', '.join(obj_ref(o) for o in objs)}")
    payload = encode_payload(package(objs))
    await channel.run_command(cluster, "kubectl apply -f manifests/", context=payload)
