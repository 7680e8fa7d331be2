"""Tests for the nginx test workload and ExternalDNS manifests."""

import json

from dnse2e.manifests.common import MANAGED_BY_KEY, MANAGED_BY_VAL, obj_namespace, obj_ref, with_prefer_system_nodes
from dnse2e.manifests.external_dns import (
    PRIVATE_PROVIDER,
    PUBLIC_PROVIDER,
    external_dns_resources,
    private_dns_config,
    public_dns_config,
)
from dnse2e.manifests.nginx import IPV4_SERVICE_NAME, IPV6_SERVICE_NAME, nginx_deployment, nginx_services

ZONE_IDS = [
    "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network/dnszones/a.com",
    "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network/dnszones/b.com",
]
PRIVATE_ZONE_IDS = ["/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network/privateDnsZones/p.com"]


# ── common ──────────────────────────────────────────────────────


def test_obj_helpers_defaults():
    obj = {"kind": "Pod", "metadata": {"name": "p"}}
    assert obj_namespace(obj) == "default"
    assert obj_ref(obj) == "Pod/p"
    assert obj_ref({}) == "<unknown>/<unnamed>"


def test_with_prefer_system_nodes_copies():
    spec = {"containers": [], "tolerations": [{"key": "x", "operator": "Exists"}]}

    out = with_prefer_system_nodes(spec)

    assert spec == {"containers": [], "tolerations": [{"key": "x", "operator": "Exists"}]}
    assert out["priorityClassName"] == "system-node-critical"
    assert {"key": "CriticalAddonsOnly", "operator": "Exists"} in out["tolerations"]
    assert len(out["tolerations"]) == 2
    preferred = out["affinity"]["nodeAffinity"]["preferredDuringSchedulingIgnoredDuringExecution"]
    assert preferred[0]["preference"]["matchExpressions"][0]["values"] == ["system"]


# ── nginx ───────────────────────────────────────────────────────


def test_nginx_services_ip_families():
    ipv4, ipv6 = nginx_services()

    assert ipv4["metadata"]["name"] == IPV4_SERVICE_NAME
    assert "ipFamilies" not in ipv4["spec"]
    assert ipv6["metadata"]["name"] == IPV6_SERVICE_NAME
    assert ipv6["spec"]["ipFamilies"] == ["IPv6"]
    assert ipv4["spec"]["type"] == ipv6["spec"]["type"] == "LoadBalancer"


def test_nginx_deployment_selector_matches_services():
    deployment = nginx_deployment()
    ipv4, _ = nginx_services()

    assert deployment["kind"] == "Deployment"
    assert deployment["metadata"]["namespace"] == "kube-system"
    assert deployment["spec"]["template"]["metadata"]["labels"] == ipv4["spec"]["selector"]
    assert deployment["spec"]["template"]["spec"]["priorityClassName"] == "system-node-critical"


# ── ExternalDNS ─────────────────────────────────────────────────


def _by_kind(objs, kind):
    return [o for o in objs if o["kind"] == kind]


def test_external_dns_resources_per_provider():
    configs = [
        public_dns_config("tenant", "sub", "rg", "client-1", ZONE_IDS),
        private_dns_config("tenant", "sub", "rg", "client-1", PRIVATE_ZONE_IDS),
    ]

    objs = external_dns_resources(configs)

    assert [o["kind"] for o in objs[:5]] == ["ServiceAccount", "ClusterRole", "ClusterRoleBinding", "ConfigMap", "Deployment"]
    assert len(objs) == 10
    names = [d["metadata"]["name"] for d in _by_kind(objs, "Deployment")]
    assert names == ["external-dns", "external-dns-private"]
    for obj in objs:
        assert obj["metadata"]["labels"][MANAGED_BY_KEY] == MANAGED_BY_VAL


def test_external_dns_config_map_uses_kubelet_identity():
    objs = external_dns_resources([public_dns_config("tenant", "sub", "rg", "client-1", ZONE_IDS)])

    cm = _by_kind(objs, "ConfigMap")[0]
    azure_json = json.loads(cm["data"]["azure.json"])
    assert azure_json == {
        "tenantId": "tenant",
        "subscriptionId": "sub",
        "resourceGroup": "rg",
        "useManagedIdentityExtension": True,
        "userAssignedIdentityID": "client-1",
    }


def test_external_dns_deployment_args():
    public, private = external_dns_resources(
        [
            public_dns_config("tenant", "sub", "rg", "client-1", ZONE_IDS),
            private_dns_config("tenant", "sub", "rg", "client-1", PRIVATE_ZONE_IDS),
        ]
    )[4::5]

    public_args = public["spec"]["template"]["spec"]["containers"][0]["args"]
    assert f"--provider={PUBLIC_PROVIDER}" in public_args
    assert "--domain-filter=a.com" in public_args
    assert "--domain-filter=b.com" in public_args
    assert not any(a.startswith("--azure-subscription-id") for a in public_args)

    private_args = private["spec"]["template"]["spec"]["containers"][0]["args"]
    assert f"--provider={PRIVATE_PROVIDER}" in private_args
    assert "--azure-subscription-id=sub" in private_args
    assert "--domain-filter=p.com" in private_args
