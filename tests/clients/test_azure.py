"""Tests for the Azure facade wiring."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

from dnse2e.clients.azure import Azure
from dnse2e.clients.dns import load_private_zone
from dnse2e.clients.roles import DNS_CONTRIBUTOR_ROLE


def _azure(arm, channel, tmp_path):
    credentials = AsyncMock()
    return Azure(credentials=credentials, arm=arm, channel=channel, log_dir=str(tmp_path), job_timeout=30)


async def test_facade_routes_to_shared_clients(cluster, arm, sdk, make_channel, tmp_path):
    sdk["resources"].resource_groups.create_or_update = AsyncMock(
        return_value=SimpleNamespace(id="/subscriptions/sub/resourceGroups/rg1", name="rg1")
    )
    channel = make_channel()
    azure = _azure(arm, channel, tmp_path)

    rg = await azure.create_resource_group("sub", "rg1", "westus")
    await azure.apply_manifests(cluster, [{"apiVersion": "v1", "kind": "Service", "metadata": {"name": "svc"}}])
    await azure.wait_stable(cluster, [{"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "web"}}])
    await azure.close()

    assert rg.name == "rg1"
    assert [(kind, sub) for kind, sub, _ in sdk.created] == [("resources", "sub")]
    sdk["resources"].close.assert_awaited_once()
    azure.credentials.close.assert_awaited_once()
    assert azure.waiter.channel is channel
    assert azure.waiter.log_dir == str(tmp_path)
    assert azure.waiter.job_timeout == 30
    assert channel.commands() == ["kubectl apply -f manifests/", "kubectl rollout status Deployment/web -n default"]


async def test_facade_picks_client_by_subscription(cluster, arm, sdk, make_channel, tmp_path):
    sdk["private_dns"].virtual_network_links.begin_create_or_update = sdk.begin(SimpleNamespace())
    sdk["authorization"].role_assignments.create = AsyncMock()
    sdk["containers"].managed_clusters.get = AsyncMock(return_value=SimpleNamespace(name=cluster.name))
    azure = _azure(arm, make_channel(), tmp_path)
    zone = load_private_zone("/subscriptions/zone-sub/resourceGroups/rg/providers/Microsoft.Network/privateDnsZones/p.com")

    await azure.link_vnet(zone, "link-0", "/vnet/id")
    await azure.assign_role("role-sub", "/scope", "principal-1", DNS_CONTRIBUTOR_ROLE)
    mc = await azure.get_cluster(cluster)

    assert mc.name == cluster.name
    assert [(kind, sub) for kind, sub, _ in sdk.created] == [
        ("private_dns", "zone-sub"),
        ("authorization", "role-sub"),
        ("containers", cluster.subscription_id),
    ]
