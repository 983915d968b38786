"""
Pytest fixtures for reputation tests. Upstream networks are replaced by in-memory fakes
and clocks are injected so TTL and wallet-age behaviour needs no sleeping.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from api.models.data_models import TransferRef
from core.analysis.wallet_analyzer import WalletAnalyzer
from handlers.reputation_handler import ReputationHandler
from services.blockchain.activity_fetcher import NetworkActivityFetcher
from services.blockchain.base import NetworkClient
from services.cache.cache_store import CacheStore
from services.score.calculator import ScoreCalculator
from utils.constants import NETWORKS, Network

WALLET_A = "0x1111111111111111111111111111111111111111"
WALLET_B = "0x2222222222222222222222222222222222222222"
WALLET_C = "0x3333333333333333333333333333333333333333"

DAY = 86400
NOW = 1_700_000_000


class FakeClock:
    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeNetworkClient(NetworkClient):
    """Scripted network: per-wallet tx counts, transfers and block timestamps"""

    def __init__(self, tx_counts: Optional[Dict[str, int]] = None,
                 earliest: Optional[Dict[tuple, TransferRef]] = None,
                 latest: Optional[Dict[tuple, TransferRef]] = None,
                 block_timestamps: Optional[Dict[int, int]] = None,
                 error: Optional[Exception] = None):
        self.tx_counts = tx_counts or {}
        self.earliest = earliest or {}
        self.latest = latest or {}
        self.block_timestamps = block_timestamps or {}
        self.error = error
        self.calls: List[tuple] = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    async def get_transaction_count(self, address: str) -> int:
        self.calls.append(("count", address))
        self._maybe_fail()
        return self.tx_counts.get(address, 0)

    async def get_earliest_transfer(self, address, direction, categories):
        self.calls.append(("earliest", address, direction, tuple(categories)))
        self._maybe_fail()
        return self.earliest.get((address, direction))

    async def get_latest_transfer(self, address, direction, categories):
        self.calls.append(("latest", address, direction, tuple(categories)))
        self._maybe_fail()
        return self.latest.get((address, direction))

    async def get_block_timestamp(self, block_number: int) -> int:
        self.calls.append(("block", block_number))
        self._maybe_fail()
        return self.block_timestamps[block_number]

    def count_calls(self, kind: str) -> int:
        return sum(1 for c in self.calls if c[0] == kind)


def active_client(wallet: str, tx_count: int, first_block: int, first_ts: int,
                  last_block: int, last_ts: int) -> FakeNetworkClient:
    """Wallet with both an incoming first transfer and an outgoing last transfer"""
    return FakeNetworkClient(
        tx_counts={wallet: tx_count},
        earliest={(wallet, "received"): TransferRef(first_block, "0xfirst")},
        latest={(wallet, "sent"): TransferRef(last_block, "0xlast")},
        block_timestamps={first_block: first_ts, last_block: last_ts},
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheStore(clock=clock)


@pytest.fixture
def clients() -> Dict[Network, FakeNetworkClient]:
    return {network: FakeNetworkClient() for network in NETWORKS}


@pytest.fixture
def fetcher(clients, cache):
    return NetworkActivityFetcher(clients, cache, ttl=300, timeout=5)


@pytest.fixture
def analyzer(fetcher, cache, clock):
    return WalletAnalyzer(fetcher, cache, ttl=300, clock=clock)


@pytest.fixture
def handler(analyzer, cache):
    return ReputationHandler(analyzer, ScoreCalculator(), cache, reputation_ttl=300, batch_window_size=5)
