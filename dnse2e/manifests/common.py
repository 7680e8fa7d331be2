"""Shared manifest helpers: canonical JSON, labels, object identity."""

import copy
import json

from dnse2e.errors import ManifestError

MANAGED_BY_KEY = "app.kubernetes.io/managed-by"
# Label value on every resource deployed by the e2e tooling
MANAGED_BY_VAL = "dnse2e"


def obj_kind(obj) -> str:
    return obj.get("kind", "")


def obj_name(obj) -> str:
    return (obj.get("metadata") or {}).get("name", "")


def obj_namespace(obj, default="default") -> str:
    return (obj.get("metadata") or {}).get("namespace") or default


def obj_ref(obj) -> str:
    """``kind/name`` string used in logs and errors."""
    return f"{obj_kind(obj) or '<unknown>'}/{obj_name(obj) or '<unnamed>'}"


def marshal_json(obj) -> bytes:
    """Serialize a manifest to its canonical JSON form (sorted keys, compact).

    Raises:
        ManifestError: if the object holds values JSON cannot encode.
    """
    try:
        return json.dumps(obj, sort_keys=True, separators=(",", ":"), allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise ManifestError(f"encoding {obj_ref(obj)}: {e}") from e


def managed_labels(extra=None):
    labels = {MANAGED_BY_KEY: MANAGED_BY_VAL}
    if extra:
        labels.update(extra)
    return labels


def with_prefer_system_nodes(pod_spec):
    """Return a copy of *pod_spec* that schedules onto AKS system nodes.

    Adds the critical priority class, tolerates ``CriticalAddonsOnly``,
    prefers ``kubernetes.azure.com/mode=system`` nodes and requires linux
    AKS nodes that are not virtual-kubelet.
    """
    spec = copy.deepcopy(pod_spec)
    spec["priorityClassName"] = "system-node-critical"
    spec.setdefault("tolerations", []).append({"key": "CriticalAddonsOnly", "operator": "Exists"})

    node_affinity = spec.setdefault("affinity", {}).setdefault("nodeAffinity", {})
    node_affinity.setdefault("preferredDuringSchedulingIgnoredDuringExecution", []).append(
        {
            "weight": 100,
            "preference": {
                "matchExpressions": [
                    {"key": "kubernetes.azure.com/mode", "operator": "In", "values": ["system"]},
                ]
            },
        }
    )
    required = node_affinity.setdefault("requiredDuringSchedulingIgnoredDuringExecution", {})
    required.setdefault("nodeSelectorTerms", []).append(
        {
            "matchExpressions": [
                {"key": "kubernetes.azure.com/cluster", "operator": "Exists"},
                {"key": "type", "operator": "NotIn", "values": ["virtual-kubelet"]},
                {"key": "kubernetes.io/os", "operator": "In", "values": ["linux"]},
            ]
        }
    )
    return spec
