"""Test workload: an nginx Deployment exposed by IPv4 and IPv6 LoadBalancer Services."""

from dnse2e.manifests.common import managed_labels, with_prefer_system_nodes

NAMESPACE = "kube-system"
APP_LABEL = {"app": "nginx"}

IPV4_SERVICE_NAME = "nginx-svc-ipv4"
IPV6_SERVICE_NAME = "nginx-svc-ipv6"


def nginx_deployment(namespace=NAMESPACE, image="nginx"):
    pod_spec = {
        "containers": [
            {
                "name": "nginx",
                "image": image,
                "ports": [{"containerPort": 80}],
            }
        ]
    }
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "nginx", "namespace": namespace, "labels": managed_labels()},
        "spec": {
            "selector": {"matchLabels": dict(APP_LABEL)},
            "template": {
                "metadata": {"labels": dict(APP_LABEL)},
                "spec": with_prefer_system_nodes(pod_spec),
            },
        },
    }


def _service(name, namespace, ip_families=None):
    spec = {
        "type": "LoadBalancer",
        "externalTrafficPolicy": "Cluster",
        "selector": dict(APP_LABEL),
        "ports": [{"protocol": "TCP", "port": 80, "targetPort": 80}],
    }
    if ip_families:
        spec["ipFamilies"] = list(ip_families)
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": name, "namespace": namespace, "labels": managed_labels()},
        "spec": spec,
    }


def nginx_services(namespace=NAMESPACE):
    """Return ``(ipv4_service, ipv6_service)`` fronting the nginx pods."""
    return _service(IPV4_SERVICE_NAME, namespace), _service(IPV6_SERVICE_NAME, namespace, ip_families=["IPv6"])
