"""Azure Resource Manager access through the async management SDK clients.

``ArmClients`` owns the credential and builds each SDK client at most once
per subscription. ``arm_call`` and ``long_running`` await SDK operations
and turn SDK failures into ArmError naming the operation.
"""

import logging
import os

from azure.core.exceptions import AzureError
from azure.mgmt.authorization.aio import AuthorizationManagementClient
from azure.mgmt.containerservice.aio import ContainerServiceClient
from azure.mgmt.dns.aio import DnsManagementClient
from azure.mgmt.network.aio import NetworkManagementClient
from azure.mgmt.privatedns.aio import PrivateDnsManagementClient
from azure.mgmt.resource.resources.aio import ResourceManagementClient

from dnse2e.errors import ArmError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://management.azure.com"

CLIENT_TYPES = {
    "resources": ResourceManagementClient,
    "dns": DnsManagementClient,
    "private_dns": PrivateDnsManagementClient,
    "network": NetworkManagementClient,
    "containers": ContainerServiceClient,
    "authorization": AuthorizationManagementClient,
}


def _describe(err):
    error = getattr(err, "error", None)
    if error is not None and getattr(error, "code", None):
        return f"{error.code}: {error.message}"
    return err.message or str(err)


async def arm_call(operation, awaitable):
    """Await an SDK call, re-raising SDK errors as ArmError."""
    try:
        return await awaitable
    except AzureError as e:
        raise ArmError(f"{operation}: {_describe(e)}", status_code=getattr(e, "status_code", None), operation=operation) from e


async def long_running(operation, begin):
    """Await a ``begin_*`` coroutine, then the final result of its poller."""

    async def _run():
        poller = await begin
        return await poller.result()

    logger.debug(f"{operation}: waiting for long-running operation")
    return await arm_call(operation, _run())


class ArmClients:
    """Per-subscription cache of async management clients.

    Args:
        credential: async token credential shared by every client.
        base_url: ARM endpoint (default ``$AZURE_RESOURCE_MANAGER_URL`` or public cloud).
        factories: optional overrides of ``CLIENT_TYPES`` entries, called as
            ``factory(credential, subscription_id, **kwargs)``.
    """

    def __init__(self, credential, base_url=None, factories=None):
        self.credential = credential
        self.base_url = (base_url or os.environ.get("AZURE_RESOURCE_MANAGER_URL") or DEFAULT_API_URL).rstrip("/")
        self._factories = {**CLIENT_TYPES, **(factories or {})}
        self._clients = {}

    def _client(self, kind, subscription_id):
        key = (kind, subscription_id)
        if key not in self._clients:
            logger.debug(f"Creating {kind} client for subscription {subscription_id}")
            self._clients[key] = self._factories[kind](
                self.credential,
                subscription_id,
                base_url=self.base_url,
                credential_scopes=[f"{self.base_url}/.default"],
            )
        return self._clients[key]

    def resources(self, subscription_id):
        return self._client("resources", subscription_id)

    def dns(self, subscription_id):
        return self._client("dns", subscription_id)

    def private_dns(self, subscription_id):
        return self._client("private_dns", subscription_id)

    def network(self, subscription_id):
        return self._client("network", subscription_id)

    def containers(self, subscription_id):
        return self._client("containers", subscription_id)

    def authorization(self, subscription_id):
        return self._client("authorization", subscription_id)

    async def close(self):
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.close()
