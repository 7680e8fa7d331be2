"""Infra definitions: the built-in set, name filtering and YAML loading."""

import os
import uuid

import yaml

from dnse2e.clients.aks import CLUSTER_OPTIONS, PRIVATE_CLUSTER_OPT
from dnse2e.errors import ConfigError
from dnse2e.infra.types import DEFAULT_PRIVATE_ZONES, DEFAULT_ZONES, Infra

DEFAULT_LOCATION = "westus"
RESOURCE_GROUP_PREFIX = "externalDns-e2e"

INFRA_KEYS = {"name", "location", "resource_group", "suffix", "cluster_options", "zones", "private_zones"}


def new_resource_group_name():
    return RESOURCE_GROUP_PREFIX + str(uuid.uuid4())


def default_infras():
    """The infras e2e runs use when no config file is given.

    Both share one freshly named resource group; each gets its own suffix.
    """
    rg = new_resource_group_name()
    return [
        Infra(name="basic cluster", resource_group=rg, location=DEFAULT_LOCATION, suffix=str(uuid.uuid4())),
        Infra(
            name="private cluster",
            resource_group=rg,
            location=DEFAULT_LOCATION,
            suffix=str(uuid.uuid4()),
            cluster_options=[PRIVATE_CLUSTER_OPT.name],
        ),
    ]


def filter_names(infras, names):
    """Keep infras whose name is in *names*, preserving definition order."""
    wanted = set(names)
    return [infra for infra in infras if infra.name in wanted]


def _count(entry, key, default):
    value = entry.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigError(f"infra '{entry.get('name')}': {key} must be a non-negative integer, got {value!r}")
    return value


def infra_from_dict(entry, resource_group=None):
    """Build an Infra from one config entry.

    Args:
        resource_group: fallback resource group name when the entry sets none.
    """
    if not isinstance(entry, dict):
        raise ConfigError(f"infra entry must be a mapping, got {type(entry).__name__}")
    unknown = set(entry) - INFRA_KEYS
    if unknown:
        raise ConfigError(f"infra '{entry.get('name')}': unknown keys {', '.join(sorted(unknown))}")
    if not entry.get("name"):
        raise ConfigError("infra entry is missing 'name'")

    options = entry.get("cluster_options") or []
    for opt in options:
        if opt not in CLUSTER_OPTIONS:
            raise ConfigError(f"infra '{entry['name']}': unknown cluster option '{opt}'")

    return Infra(
        name=entry["name"],
        resource_group=entry.get("resource_group") or resource_group or new_resource_group_name(),
        location=entry.get("location") or DEFAULT_LOCATION,
        suffix=str(entry.get("suffix") or uuid.uuid4()),
        cluster_options=list(options),
        zones=_count(entry, "zones", DEFAULT_ZONES),
        private_zones=_count(entry, "private_zones", DEFAULT_PRIVATE_ZONES),
    )


def load_infras(path):
    """Load infra definitions from a YAML file.

    The file holds either a list of entries or a mapping with an ``infras``
    list and an optional shared ``resource_group``.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Infra config not found: {path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    resource_group = None
    if isinstance(config, dict):
        resource_group = config.get("resource_group")
        config = config.get("infras")
    if not isinstance(config, list) or not config:
        raise ConfigError(f"{path}: expected a non-empty list of infras")

    if resource_group is None:
        resource_group = new_resource_group_name()
    infras = [infra_from_dict(entry, resource_group) for entry in config]

    names = [infra.name for infra in infras]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"{path}: duplicate infra names {', '.join(duplicates)}")
    return infras
