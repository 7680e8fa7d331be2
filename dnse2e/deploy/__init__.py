"""Deploy library: workload stability checks after manifests are applied."""

from dnse2e.deploy.stability import PROBE_TIMEOUT, WORKLOAD_KINDS, StabilityWaiter

__all__ = [
    "StabilityWaiter",
    "PROBE_TIMEOUT",
    "WORKLOAD_KINDS",
]
