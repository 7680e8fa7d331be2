"""Infra definitions, provisioned results and their JSON snapshot form."""

import json
from dataclasses import asdict, dataclass, field

from dnse2e.clients.aks import Aks, load_aks
from dnse2e.clients.dns import PrivateZone, Zone, load_private_zone, load_zone
from dnse2e.clients.resource_group import ResourceGroup, load_resource_group
from dnse2e.clients.resource_id import parse_resource_id
from dnse2e.errors import SnapshotError

DEFAULT_ZONES = 2
DEFAULT_PRIVATE_ZONES = 2


@dataclass
class Infra:
    """One infrastructure definition to provision."""

    name: str
    resource_group: str
    location: str
    suffix: str
    cluster_options: list[str] = field(default_factory=list)
    zones: int = DEFAULT_ZONES
    private_zones: int = DEFAULT_PRIVATE_ZONES

    @property
    def cluster_name(self) -> str:
        return f"cluster{self.suffix}"

    @property
    def vnet_name(self) -> str:
        return f"vnet{self.suffix}"


@dataclass(frozen=True)
class Provisioned:
    """Handles to everything created for one infra."""

    name: str
    cluster: Aks
    resource_group: ResourceGroup
    subscription_id: str
    tenant_id: str
    zones: tuple[Zone, ...] = ()
    private_zones: tuple[PrivateZone, ...] = ()
    ipv4_service_name: str = ""
    ipv6_service_name: str = ""

    def loadable(self) -> "LoadableProvisioned":
        """Project to the serializable snapshot form.

        Raises:
            SnapshotError: if the cluster or resource group id does not parse.
        """
        try:
            parse_resource_id(self.cluster.id)
            parse_resource_id(self.resource_group.id)
        except ValueError as e:
            raise SnapshotError(f"snapshotting {self.name}: {e}") from e

        return LoadableProvisioned(
            name=self.name,
            cluster=self.cluster.id,
            cluster_location=self.cluster.location,
            cluster_dns_service_ip=self.cluster.dns_service_ip,
            cluster_principal_id=self.cluster.principal_id,
            cluster_client_id=self.cluster.client_id,
            cluster_options={opt: {} for opt in sorted(self.cluster.options)},
            zones=[LoadableZone(resource_id=z.id, nameservers=list(z.nameservers)) for z in self.zones],
            private_zones=[z.id for z in self.private_zones],
            resource_group=self.resource_group.id,
            subscription_id=self.subscription_id,
            tenant_id=self.tenant_id,
            ipv4_service_name=self.ipv4_service_name,
            ipv6_service_name=self.ipv6_service_name,
        )


@dataclass
class LoadableZone:
    resource_id: str
    nameservers: list[str] = field(default_factory=list)


@dataclass
class LoadableProvisioned:
    """Plain-data snapshot of a Provisioned, as written to the infra file."""

    name: str
    cluster: str
    cluster_location: str
    cluster_dns_service_ip: str
    cluster_principal_id: str
    cluster_client_id: str
    resource_group: str
    subscription_id: str
    tenant_id: str
    cluster_options: dict[str, dict] = field(default_factory=dict)
    zones: list[LoadableZone] = field(default_factory=list)
    private_zones: list[str] = field(default_factory=list)
    ipv4_service_name: str = ""
    ipv6_service_name: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "LoadableProvisioned":
        """Build from a decoded snapshot entry.

        Raises:
            SnapshotError: on missing keys or malformed values.
        """
        if not isinstance(d, dict):
            raise SnapshotError(f"snapshot entry must be an object, got {type(d).__name__}")
        name = d.get("name", "<unnamed>")
        try:
            return cls(
                name=d["name"],
                cluster=d["cluster"],
                cluster_location=d["cluster_location"],
                cluster_dns_service_ip=d["cluster_dns_service_ip"],
                cluster_principal_id=d["cluster_principal_id"],
                cluster_client_id=d["cluster_client_id"],
                resource_group=d["resource_group"],
                subscription_id=d["subscription_id"],
                tenant_id=d["tenant_id"],
                cluster_options={opt: {} for opt in d.get("cluster_options") or {}},
                zones=[
                    LoadableZone(resource_id=z["resource_id"], nameservers=list(z.get("nameservers") or []))
                    for z in d.get("zones") or []
                ],
                private_zones=list(d.get("private_zones") or []),
                ipv4_service_name=d.get("ipv4_service_name", ""),
                ipv6_service_name=d.get("ipv6_service_name", ""),
            )
        except KeyError as e:
            raise SnapshotError(f"snapshot entry {name}: missing key {e}") from e
        except (TypeError, AttributeError) as e:
            raise SnapshotError(f"snapshot entry {name}: {e}") from e

    def provisioned(self) -> Provisioned:
        """Rebuild handles from the snapshot without any network calls.

        Raises:
            SnapshotError: if a resource id does not parse.
        """
        try:
            return Provisioned(
                name=self.name,
                cluster=load_aks(
                    self.cluster,
                    self.cluster_dns_service_ip,
                    self.cluster_location,
                    self.cluster_principal_id,
                    self.cluster_client_id,
                    self.cluster_options,
                ),
                resource_group=load_resource_group(self.resource_group),
                subscription_id=self.subscription_id,
                tenant_id=self.tenant_id,
                zones=tuple(load_zone(z.resource_id, z.nameservers) for z in self.zones),
                private_zones=tuple(load_private_zone(rid) for rid in self.private_zones),
                ipv4_service_name=self.ipv4_service_name,
                ipv6_service_name=self.ipv6_service_name,
            )
        except ValueError as e:
            raise SnapshotError(f"parsing snapshot {self.name}: {e}") from e


def to_loadable(provisioned) -> list[LoadableProvisioned]:
    ret = []
    for p in provisioned:
        try:
            ret.append(p.loadable())
        except SnapshotError as e:
            raise SnapshotError(f"loading provisioned {p.name}: {e}") from e
    return ret


def to_provisioned(loadables) -> list[Provisioned]:
    ret = []
    for loadable in loadables:
        try:
            ret.append(loadable.provisioned())
        except SnapshotError as e:
            raise SnapshotError(f"parsing loadable {loadable.name}: {e}") from e
    return ret


def dump_snapshot(provisioned) -> str:
    """Serialize provisioned infras to the JSON infra-file format."""
    return json.dumps([lp.to_dict() for lp in to_loadable(provisioned)], indent=2)


def load_snapshot(text) -> list[Provisioned]:
    """Parse an infra file written by ``dump_snapshot``.

    Raises:
        SnapshotError: on invalid JSON or malformed entries.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"infra file is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SnapshotError("infra file must contain a JSON array")
    return to_provisioned([LoadableProvisioned.from_dict(d) for d in data])
