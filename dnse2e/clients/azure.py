"""Single handle over the Azure operations the provisioner needs.

The provisioner only talks to an ``Azure`` object, so tests can pass a
fake with the same coroutine methods.
"""

from dnse2e.clients import aks, dns, resource_group, roles, vnet
from dnse2e.clients.arm import ArmClients
from dnse2e.clients.credential import CredentialProvider
from dnse2e.clients.resource_id import parse_resource_id
from dnse2e.clients.run_command import RemoteCommandChannel
from dnse2e.deploy.stability import StabilityWaiter


class Azure:
    """Bundles credentials, the management clients, the run-command channel and the stability waiter."""

    def __init__(self, credentials=None, arm=None, channel=None, waiter=None, log_dir=".", job_timeout=None):
        self.credentials = credentials or CredentialProvider()
        self.arm = arm or ArmClients(self.credentials)
        self.channel = channel or RemoteCommandChannel(self.arm)
        self.waiter = waiter or StabilityWaiter(self.channel, log_dir=log_dir, job_timeout=job_timeout)

    async def close(self):
        await self.arm.close()
        await self.credentials.close()

    async def create_resource_group(self, subscription_id, name, location):
        return await resource_group.new_resource_group(self.arm.resources(subscription_id), name, location)

    async def create_zone(self, subscription_id, resource_group_name, name):
        return await dns.new_zone(self.arm.dns(subscription_id), resource_group_name, name)

    async def create_private_zone(self, subscription_id, resource_group_name, name):
        return await dns.new_private_zone(self.arm.private_dns(subscription_id), resource_group_name, name)

    async def create_vnet(self, subscription_id, resource_group_name, location, name=vnet.DEFAULT_VNET_NAME):
        return await vnet.new_vnet(self.arm.network(subscription_id), resource_group_name, location, name=name)

    async def link_vnet(self, zone, link_name, vnet_id):
        private_dns = self.arm.private_dns(parse_resource_id(zone.id).subscription_id)
        await dns.link_vnet(private_dns, zone, link_name, vnet_id)

    async def create_cluster(self, subscription_id, resource_group_name, name, location, subnet_id, options=()):
        containers = self.arm.containers(subscription_id)
        return await aks.new_aks(containers, subscription_id, resource_group_name, name, location, subnet_id, options)

    async def get_cluster(self, cluster):
        return await aks.get_cluster(self.arm.containers(cluster.subscription_id), cluster)

    async def assign_role(self, subscription_id, scope, principal_id, role):
        return await roles.assign_role(self.arm.authorization(subscription_id), subscription_id, scope, principal_id, role)

    async def apply_manifests(self, cluster, objs):
        await aks.apply_manifests(self.channel, cluster, objs)

    async def wait_stable(self, cluster, objs):
        await self.waiter.wait_stable(cluster, objs)
