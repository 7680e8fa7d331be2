"""Infra definitions, provisioning, and the provisioned snapshot format."""

from dnse2e.infra.infras import default_infras, filter_names, infra_from_dict, load_infras
from dnse2e.infra.provision import provision, provision_all
from dnse2e.infra.types import (
    Infra,
    LoadableProvisioned,
    LoadableZone,
    Provisioned,
    dump_snapshot,
    load_snapshot,
    to_loadable,
    to_provisioned,
)

__all__ = [
    "Infra",
    "LoadableProvisioned",
    "LoadableZone",
    "Provisioned",
    "default_infras",
    "dump_snapshot",
    "filter_names",
    "infra_from_dict",
    "load_infras",
    "load_snapshot",
    "provision",
    "provision_all",
    "to_loadable",
    "to_provisioned",
]
