"""Tests for dnse2e.infra.infras: default set, filtering, YAML config loading."""

import pytest
import yaml

from dnse2e.errors import ConfigError
from dnse2e.infra.infras import RESOURCE_GROUP_PREFIX, default_infras, filter_names, load_infras


def _write(tmp_path, data):
    path = tmp_path / "infras.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return str(path)


def test_default_infras():
    infras = default_infras()

    assert [i.name for i in infras] == ["basic cluster", "private cluster"]
    assert infras[0].resource_group == infras[1].resource_group
    assert infras[0].resource_group.startswith(RESOURCE_GROUP_PREFIX)
    assert infras[0].suffix != infras[1].suffix
    assert infras[0].cluster_options == []
    assert infras[1].cluster_options == ["private cluster"]
    assert all(i.location == "westus" and i.zones == 2 and i.private_zones == 2 for i in infras)


def test_filter_names_keeps_definition_order():
    infras = default_infras()

    assert [i.name for i in filter_names(infras, ["private cluster", "basic cluster"])] == ["basic cluster", "private cluster"]
    assert filter_names(infras, ["nope"]) == []


def test_load_infras_list(tmp_path):
    path = _write(
        tmp_path,
        [
            {"name": "basic", "location": "eastus", "zones": 1, "private_zones": 0},
            {"name": "osm", "cluster_options": ["osm cluster"], "suffix": "abc"},
        ],
    )

    infras = load_infras(path)

    assert [i.name for i in infras] == ["basic", "osm"]
    assert infras[0].location == "eastus"
    assert infras[0].zones == 1
    assert infras[0].private_zones == 0
    assert infras[1].suffix == "abc"
    assert infras[1].cluster_options == ["osm cluster"]
    assert infras[0].resource_group == infras[1].resource_group


def test_load_infras_mapping_with_shared_resource_group(tmp_path):
    path = _write(tmp_path, {"resource_group": "my-rg", "infras": [{"name": "a"}, {"name": "b", "resource_group": "other"}]})

    infras = load_infras(path)

    assert [i.resource_group for i in infras] == ["my-rg", "other"]


def test_load_infras_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_infras(str(tmp_path / "missing.yaml"))


def test_load_infras_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("name: [unclosed")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_infras(str(path))


@pytest.mark.parametrize(
    "entries, message",
    [
        ([{"location": "westus"}], "missing 'name'"),
        ([{"name": "a", "cluster_options": ["gpu cluster"]}], "unknown cluster option 'gpu cluster'"),
        ([{"name": "a", "zones": -1}], "zones must be a non-negative integer"),
        ([{"name": "a", "colour": "blue"}], "unknown keys colour"),
        ([{"name": "a"}, {"name": "a"}], "duplicate infra names a"),
        ([], "non-empty list"),
    ],
)
def test_load_infras_rejects_bad_entries(tmp_path, entries, message):
    with pytest.raises(ConfigError, match=message):
        load_infras(_write(tmp_path, entries))
