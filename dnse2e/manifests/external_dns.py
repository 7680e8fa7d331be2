"""ExternalDNS manifests for public (Azure DNS) and private (Azure Private DNS) zones.

Each provider gets its own ServiceAccount, RBAC, ``azure.json`` ConfigMap
and Deployment in ``kube-system``. ExternalDNS authenticates with the
cluster's kubelet managed identity, which the provisioner grants
contributor roles over the zones.
"""

import json
from dataclasses import dataclass, field

from dnse2e.clients.resource_id import parse_resource_id
from dnse2e.manifests.common import managed_labels, with_prefer_system_nodes

NAMESPACE = "kube-system"
DEFAULT_REGISTRY = "mcr.microsoft.com"
IMAGE_PATH = "oss/kubernetes/external-dns:v0.13.5"
DEFAULT_SYNC_INTERVAL = "3m0s"

PUBLIC_PROVIDER = "azure"
PRIVATE_PROVIDER = "azure-private-dns"

_RESOURCE_NAMES = {
    PUBLIC_PROVIDER: "external-dns",
    PRIVATE_PROVIDER: "external-dns-private",
}


@dataclass
class ExternalDnsConfig:
    """Settings for one ExternalDNS instance."""

    provider: str
    tenant_id: str
    subscription_id: str
    resource_group: str
    client_id: str
    zone_resource_ids: list[str] = field(default_factory=list)
    namespace: str = NAMESPACE
    registry: str = DEFAULT_REGISTRY
    sync_interval: str = DEFAULT_SYNC_INTERVAL
    owner_id: str = "dnse2e"

    @property
    def resource_name(self) -> str:
        return _RESOURCE_NAMES[self.provider]

    @property
    def zone_names(self) -> list[str]:
        return [parse_resource_id(rid).name for rid in self.zone_resource_ids]


def public_dns_config(tenant_id, subscription_id, resource_group, client_id, zone_ids, owner_id="dnse2e"):
    return ExternalDnsConfig(PUBLIC_PROVIDER, tenant_id, subscription_id, resource_group, client_id, list(zone_ids), owner_id=owner_id)


def private_dns_config(tenant_id, subscription_id, resource_group, client_id, zone_ids, owner_id="dnse2e"):
    return ExternalDnsConfig(PRIVATE_PROVIDER, tenant_id, subscription_id, resource_group, client_id, list(zone_ids), owner_id=owner_id)


def _metadata(config, name=None, namespaced=True):
    meta = {"name": name or config.resource_name, "labels": managed_labels({"app": config.resource_name})}
    if namespaced:
        meta["namespace"] = config.namespace
    return meta


def _service_account(config):
    return {"apiVersion": "v1", "kind": "ServiceAccount", "metadata": _metadata(config)}


def _cluster_role(config):
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRole",
        "metadata": _metadata(config, namespaced=False),
        "rules": [
            {"apiGroups": [""], "resources": ["services", "endpoints", "pods", "nodes"], "verbs": ["get", "watch", "list"]},
            {"apiGroups": ["extensions", "networking.k8s.io"], "resources": ["ingresses"], "verbs": ["get", "watch", "list"]},
        ],
    }


def _cluster_role_binding(config):
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRoleBinding",
        "metadata": _metadata(config, name=f"{config.resource_name}-viewer", namespaced=False),
        "roleRef": {"apiGroup": "rbac.authorization.k8s.io", "kind": "ClusterRole", "name": config.resource_name},
        "subjects": [{"kind": "ServiceAccount", "name": config.resource_name, "namespace": config.namespace}],
    }


def _config_map(config):
    azure_json = {
        "tenantId": config.tenant_id,
        "subscriptionId": config.subscription_id,
        "resourceGroup": config.resource_group,
        "useManagedIdentityExtension": True,
        "userAssignedIdentityID": config.client_id,
    }
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": _metadata(config),
        "data": {"azure.json": json.dumps(azure_json, indent=2)},
    }


def _deployment(config):
    args = [
        f"--provider={config.provider}",
        "--source=service",
        "--source=ingress",
        f"--interval={config.sync_interval}",
        f"--txt-owner-id={config.owner_id}",
        f"--azure-resource-group={config.resource_group}",
    ]
    if config.provider == PRIVATE_PROVIDER:
        args.append(f"--azure-subscription-id={config.subscription_id}")
    args += [f"--domain-filter={name}" for name in config.zone_names]

    pod_spec = {
        "serviceAccountName": config.resource_name,
        "containers": [
            {
                "name": "controller",
                "image": f"{config.registry}/{IMAGE_PATH}",
                "args": args,
                "volumeMounts": [{"name": "azure-config", "mountPath": "/etc/kubernetes", "readOnly": True}],
                "securityContext": {"runAsNonRoot": True, "readOnlyRootFilesystem": True},
            }
        ],
        "volumes": [{"name": "azure-config", "configMap": {"name": config.resource_name}}],
    }
    selector = {"app": config.resource_name}
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": _metadata(config),
        "spec": {
            "replicas": 1,
            "strategy": {"type": "Recreate"},
            "selector": {"matchLabels": selector},
            "template": {
                "metadata": {"labels": managed_labels(selector)},
                "spec": with_prefer_system_nodes(pod_spec),
            },
        },
    }


def external_dns_resources(configs):
    """All objects needed to run one ExternalDNS per config, in apply order."""
    objs = []
    for config in configs:
        objs += [
            _service_account(config),
            _cluster_role(config),
            _cluster_role_binding(config),
            _config_map(config),
            _deployment(config),
        ]
    return objs
