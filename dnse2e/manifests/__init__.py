"""Kubernetes manifests and run-command payload packaging."""

from dnse2e.manifests.common import (
    MANAGED_BY_KEY,
    MANAGED_BY_VAL,
    marshal_json,
    obj_kind,
    obj_name,
    obj_namespace,
    obj_ref,
    with_prefer_system_nodes,
)
from dnse2e.manifests.external_dns import (
    ExternalDnsConfig,
    external_dns_resources,
    private_dns_config,
    public_dns_config,
)
from dnse2e.manifests.nginx import (
    IPV4_SERVICE_NAME,
    IPV6_SERVICE_NAME,
    nginx_deployment,
    nginx_services,
)
from dnse2e.manifests.package import encode_payload, package

__all__ = [
    "MANAGED_BY_KEY",
    "MANAGED_BY_VAL",
    "marshal_json",
    "obj_kind",
    "obj_name",
    "obj_namespace",
    "obj_ref",
    "with_prefer_system_nodes",
    "ExternalDnsConfig",
    "external_dns_resources",
    "private_dns_config",
    "public_dns_config",
    "IPV4_SERVICE_NAME",
    "IPV6_SERVICE_NAME",
    "nginx_deployment",
    "nginx_services",
    "encode_payload",
    "package",
]
