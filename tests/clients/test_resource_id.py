"""Tests for dnse2e.clients.resource_id."""

import pytest

from dnse2e.clients.resource_id import parse_resource_id

CLUSTER_ID = "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.ContainerService/managedClusters/c1"


def test_parse_provider_resource():
    rid = parse_resource_id(CLUSTER_ID)
    assert rid.subscription_id == "sub"
    assert rid.resource_group == "rg"
    assert rid.provider == "Microsoft.ContainerService"
    assert rid.resource_type == "managedClusters"
    assert rid.name == "c1"
    assert str(rid) == CLUSTER_ID


def test_parse_child_resource():
    subnet = "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network/virtualNetworks/v/subnets/s"
    rid = parse_resource_id(subnet)
    assert rid.resource_name == "v"
    assert rid.children == (("subnets", "s"),)
    assert rid.name == "s"
    assert str(rid) == subnet


def test_parse_resource_group_id():
    rid = parse_resource_id("/subscriptions/sub/resourceGroups/rg")
    assert rid.name == "rg"
    assert rid.provider == ""
    assert str(rid) == "/subscriptions/sub/resourceGroups/rg"


def test_parse_accepts_lowercase_resource_groups_segment():
    rid = parse_resource_id("/subscriptions/sub/resourcegroups/rg/providers/Microsoft.Network/dnszones/a.com")
    assert rid.resource_group == "rg"
    assert rid.name == "a.com"


@pytest.mark.parametrize(
    "bad",
    [
        "",
        "/subscriptions/sub",
        "/foo/sub/resourceGroups/rg",
        "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network",
        "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network/virtualNetworks/v/subnets",
    ],
)
def test_parse_rejects_invalid_ids(bad):
    with pytest.raises(ValueError, match="invalid resource id"):
        parse_resource_id(bad)
