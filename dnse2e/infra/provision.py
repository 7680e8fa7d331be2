"""Provision one or more infra definitions.

Stages run strictly in order; branches inside a stage run concurrently:

1. resource group
2. A: public zones, private zones, vnet + subnet
3. B: link each private zone to the vnet
4. C: AKS cluster on the subnet
5. D: role assignments for the cluster's kubelet identity
6. E: deploy ExternalDNS and the nginx test workload, wait for stability
"""

import asyncio
import logging

from dnse2e.clients.aks import resolve_cluster_options
from dnse2e.clients.roles import DNS_CONTRIBUTOR_ROLE, NETWORK_CONTRIBUTOR_ROLE, PRIVATE_DNS_CONTRIBUTOR_ROLE
from dnse2e.errors import ProvisioningError
from dnse2e.infra.types import Provisioned
from dnse2e.logging_setup import infra_logger
from dnse2e.manifests.external_dns import external_dns_resources, private_dns_config, public_dns_config
from dnse2e.manifests.nginx import nginx_deployment, nginx_services

logger = logging.getLogger(__name__)


async def _step(desc, coro):
    try:
        return await coro
    except Exception as e:
        raise ProvisioningError(f"{desc}: {e}") from e


async def _gather_stage(lgr, stage, steps):
    """Run ``(desc, coro)`` steps concurrently, wait for all, raise the first error.

    Returns:
        Results in step order.
    """
    lgr.info(f"Stage {stage}: {len(steps)} operations")
    results = await asyncio.gather(*(_step(desc, coro) for desc, coro in steps), return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def zone_name(infra, i):
    return f"public-zone-{i}-{infra.suffix}.com"


def private_zone_name(infra, i):
    return f"private-zone-{i}-{infra.suffix}.com"


async def provision(infra, tenant_id, subscription_id, azure) -> Provisioned:
    """Create every resource for *infra* and deploy the test workloads.

    Args:
        infra: Infra definition.
        azure: Azure facade (or a fake with the same methods).

    Returns:
        Provisioned handles, including the two test service names.

    Raises:
        ProvisioningError: wrapping the first failure, with the failed
            operation in the message and the root cause chained.
    """
    lgr = infra_logger(infra.name)
    lgr.info("Provisioning infrastructure...")
    options = resolve_cluster_options(infra.cluster_options)

    rg = await _step(
        f"creating resource group {infra.resource_group}",
        azure.create_resource_group(subscription_id, infra.resource_group, infra.location),
    )

    # Stage A: slots [0, n) zones, [n, n+m) private zones, last slot vnet
    n, m = infra.zones, infra.private_zones
    stage_a = [
        (f"creating zone {zone_name(infra, i)}", azure.create_zone(subscription_id, rg.name, zone_name(infra, i)))
        for i in range(n)
    ]
    stage_a += [
        (
            f"creating private zone {private_zone_name(infra, i)}",
            azure.create_private_zone(subscription_id, rg.name, private_zone_name(infra, i)),
        )
        for i in range(m)
    ]
    stage_a.append(("creating vnet", azure.create_vnet(subscription_id, rg.name, infra.location, infra.vnet_name)))
    results = await _gather_stage(lgr, "A", stage_a)
    zones = tuple(results[:n])
    private_zones = tuple(results[n : n + m])
    vnet = results[n + m]

    # Stage B
    await _gather_stage(
        lgr,
        "B",
        [
            (f"linking private zone {pz.name} to vnet", azure.link_vnet(pz, f"link-{i}-{infra.suffix}", vnet.vnet_id))
            for i, pz in enumerate(private_zones)
        ],
    )

    # Stage C
    lgr.info("Stage C: creating cluster")
    cluster = await _step(
        f"creating cluster {infra.cluster_name}",
        azure.create_cluster(subscription_id, rg.name, infra.cluster_name, infra.location, vnet.subnet_id, options),
    )

    # Stage D
    principal_id = cluster.principal_id
    grants = [(DNS_CONTRIBUTOR_ROLE, z.id) for z in zones]
    grants += [(PRIVATE_DNS_CONTRIBUTOR_ROLE, pz.id) for pz in private_zones]
    grants += [(NETWORK_CONTRIBUTOR_ROLE, vnet.vnet_id), (NETWORK_CONTRIBUTOR_ROLE, vnet.subnet_id)]
    await _gather_stage(
        lgr,
        "D",
        [
            (f"assigning {role.name} on {scope}", azure.assign_role(subscription_id, scope, principal_id, role))
            for role, scope in grants
        ],
    )

    # Stage E
    lgr.info("Stage E: deploying workloads")
    dns_configs = [
        public_dns_config(tenant_id, subscription_id, rg.name, cluster.client_id, [z.id for z in zones]),
        private_dns_config(tenant_id, subscription_id, rg.name, cluster.client_id, [pz.id for pz in private_zones]),
    ]
    # A provider with no zones gets no ExternalDNS instance
    external_dns_objs = external_dns_resources([c for c in dns_configs if c.zone_resource_ids])
    ipv4_service, ipv6_service = nginx_services()
    workload_objs = [nginx_deployment(), ipv4_service, ipv6_service]

    if external_dns_objs:
        await _step("deploying external dns", azure.apply_manifests(cluster, external_dns_objs))
    await _step("deploying nginx test workload", azure.apply_manifests(cluster, workload_objs))
    await _step("waiting for workloads to be stable", azure.wait_stable(cluster, external_dns_objs + workload_objs))

    lgr.info("Finished provisioning infrastructure.")
    return Provisioned(
        name=infra.name,
        cluster=cluster,
        resource_group=rg,
        subscription_id=subscription_id,
        tenant_id=tenant_id,
        zones=zones,
        private_zones=private_zones,
        ipv4_service_name=ipv4_service["metadata"]["name"],
        ipv6_service_name=ipv6_service["metadata"]["name"],
    )


async def provision_all(infras, tenant_id, subscription_id, azure) -> list[Provisioned]:
    """Provision several infras concurrently; waits for all before raising the first error."""
    logger.info(f"Provisioning {len(infras)} infrastructures...")
    results = await asyncio.gather(
        *(_step(f"provisioning infrastructure {infra.name}", provision(infra, tenant_id, subscription_id, azure)) for infra in infras),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    logger.info("Finished provisioning all infrastructure.")
    return list(results)
