"""
Tests for the per-network activity fetcher: short-circuit, two-sided probes,
category policy, degradation and caching.
"""

from __future__ import annotations

import asyncio

import pytest

from api.models.data_models import TransferRef
from services.blockchain.activity_fetcher import NetworkActivityFetcher
from services.blockchain.alchemy_client import UpstreamError
from utils.constants import Network

from conftest import DAY, NOW, WALLET_A, FakeNetworkClient, active_client


@pytest.mark.asyncio
async def test_zero_count_short_circuits(fetcher, clients):
    activity = await fetcher.fetch_activity(WALLET_A, Network.BASE)

    assert activity.network == "Base"
    assert activity.chain_id == 8453
    assert activity.transaction_count == 0
    assert activity.first_transaction is None
    assert activity.last_transaction is None
    assert activity.error is None
    assert clients[Network.BASE].calls == [("count", WALLET_A)]


@pytest.mark.asyncio
async def test_first_and_last_use_both_directions(fetcher, clients):
    """Oldest block among sent/received wins for first, newest for last."""
    clients[Network.ARBITRUM] = FakeNetworkClient(
        tx_counts={WALLET_A: 12},
        earliest={
            (WALLET_A, "sent"): TransferRef(500, "0xs1"),
            (WALLET_A, "received"): TransferRef(100, "0xr1"),
        },
        latest={
            (WALLET_A, "sent"): TransferRef(900, "0xs2"),
            (WALLET_A, "received"): TransferRef(700, "0xr2"),
        },
        block_timestamps={100: NOW - 50 * DAY, 500: NOW - 10 * DAY, 700: NOW - 5 * DAY, 900: NOW - DAY},
    )

    activity = await fetcher.fetch_activity(WALLET_A, Network.ARBITRUM)

    assert activity.transaction_count == 12
    assert activity.first_transaction == NOW - 50 * DAY
    assert activity.last_transaction == NOW - DAY
    client = clients[Network.ARBITRUM]
    assert client.count_calls("earliest") == 2
    assert client.count_calls("latest") == 2
    assert sorted(c[1] for c in client.calls if c[0] == "block") == [100, 900]


@pytest.mark.asyncio
async def test_one_sided_history(fetcher, clients):
    clients[Network.OPTIMISM] = FakeNetworkClient(
        tx_counts={WALLET_A: 3},
        earliest={(WALLET_A, "received"): TransferRef(42)},
        block_timestamps={42: NOW - 3 * DAY},
    )

    activity = await fetcher.fetch_activity(WALLET_A, Network.OPTIMISM)

    assert activity.first_transaction == NOW - 3 * DAY
    assert activity.last_transaction is None


@pytest.mark.asyncio
async def test_internal_category_only_where_supported(fetcher, clients):
    for network in (Network.ETHEREUM, Network.BASE):
        clients[network] = active_client(WALLET_A, 1, 1, NOW, 2, NOW)
        await fetcher.fetch_activity(WALLET_A, network)

    eth_categories = {c[3] for c in clients[Network.ETHEREUM].calls if c[0] == "earliest"}
    base_categories = {c[3] for c in clients[Network.BASE].calls if c[0] == "earliest"}

    assert all("internal" in cats for cats in eth_categories)
    assert all("internal" not in cats for cats in base_categories)
    assert all("external" in cats and "erc20" in cats for cats in base_categories)


@pytest.mark.asyncio
async def test_failure_degrades_and_is_cached(fetcher, clients):
    clients[Network.POLYGON] = FakeNetworkClient(error=UpstreamError("rate limited"))

    activity = await fetcher.fetch_activity(WALLET_A, Network.POLYGON)
    again = await fetcher.fetch_activity(WALLET_A, Network.POLYGON)

    assert activity.transaction_count == 0
    assert activity.first_transaction is None
    assert activity.error == "rate limited"
    assert activity.degraded is True
    assert again is activity
    assert clients[Network.POLYGON].count_calls("count") == 1


@pytest.mark.asyncio
async def test_timestamp_failure_degrades_whole_network(fetcher, clients):
    client = active_client(WALLET_A, 7, 1, NOW, 2, NOW)
    client.block_timestamps = {}
    clients[Network.ETHEREUM] = client

    activity = await fetcher.fetch_activity(WALLET_A, Network.ETHEREUM)

    assert activity.transaction_count == 0
    assert activity.error is not None


@pytest.mark.asyncio
async def test_slow_network_times_out(clients, cache):
    class SlowClient(FakeNetworkClient):
        async def get_transaction_count(self, address):
            await asyncio.sleep(5)
            return 1

    clients[Network.BASE] = SlowClient()
    fetcher = NetworkActivityFetcher(clients, cache, ttl=300, timeout=0.05)

    activity = await fetcher.fetch_activity(WALLET_A, Network.BASE)

    assert activity.transaction_count == 0
    assert activity.error == "TimeoutError"


@pytest.mark.asyncio
async def test_cache_hit_skips_upstream_until_expiry(fetcher, clients, clock):
    clients[Network.ETHEREUM] = active_client(WALLET_A, 4, 10, NOW - DAY, 20, NOW)

    first = await fetcher.fetch_activity(WALLET_A, Network.ETHEREUM)
    second = await fetcher.fetch_activity(WALLET_A, Network.ETHEREUM)
    assert first == second
    assert clients[Network.ETHEREUM].count_calls("count") == 1

    clock.advance(301)
    await fetcher.fetch_activity(WALLET_A, Network.ETHEREUM)
    assert clients[Network.ETHEREUM].count_calls("count") == 2
