import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from api.models.data_models import NetworkActivity, WalletAnalysis
from services.blockchain.activity_fetcher import NetworkActivityFetcher
from services.cache.cache_store import CacheStore, CacheKeys
from utils.constants import Network, ALL_NETWORKS, QUICK_NETWORKS, SECONDS_PER_DAY
from utils.web3_utils import validate_wallet_address, shorten_address

logger = logging.getLogger(__name__)


class AnalysisMode(Enum):
    FULL = "full"
    QUICK = "quick"

    @property
    def networks(self) -> Tuple[Network, ...]:
        return ALL_NETWORKS if self is AnalysisMode.FULL else QUICK_NETWORKS


def wallet_age_days(first_timestamp: Optional[int], now: float) -> int:
    """Whole days since first activity, 0 when unknown"""
    if first_timestamp is None:
        return 0
    return max(0, int((now - first_timestamp) // SECONDS_PER_DAY))


def reduce_activities(wallet_address: str, activities: Sequence[NetworkActivity],
                      now: float) -> WalletAnalysis:
    """Fold per-network results into one wallet view (order independent)"""
    total_transactions = sum(a.transaction_count for a in activities)
    active_networks = sum(1 for a in activities if a.transaction_count > 0)

    first_timestamps = [a.first_transaction for a in activities if a.first_transaction is not None]
    first_timestamp = min(first_timestamps) if first_timestamps else None

    return WalletAnalysis(
        wallet_address=wallet_address,
        wallet_age=wallet_age_days(first_timestamp, now),
        first_transaction_timestamp=first_timestamp,
        total_transactions=total_transactions,
        active_networks=active_networks,
        network_activities=tuple(activities),
        analyzed_at=now,
    )


class WalletAnalyzer:
    """Multichain wallet analysis: fans out one fetch per network, then reduces"""

    def __init__(self, fetcher: NetworkActivityFetcher, cache: CacheStore,
                 ttl: float = 300, clock: Callable[[], float] = time.time):
        self.fetcher = fetcher
        self.cache = cache
        self.ttl = ttl
        self.clock = clock

    async def analyze(self, wallet_address: str, mode: AnalysisMode = AnalysisMode.FULL) -> WalletAnalysis:
        wallet_address = validate_wallet_address(wallet_address)

        cache_key = CacheKeys.wallet_analysis(wallet_address, mode.value)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        networks = mode.networks
        start_time = time.time()

        # Results keep the network order, not completion order
        activities = await asyncio.gather(
            *(self.fetcher.fetch_activity(wallet_address, network) for network in networks)
        )

        analysis = reduce_activities(wallet_address, activities, self.clock())

        degraded = [a.network for a in activities if a.degraded]
        if degraded:
            logger.warning(f"Degraded networks for {shorten_address(wallet_address)}: {', '.join(degraded)}")

        logger.info(
            f"Analyzed {shorten_address(wallet_address)} ({mode.value}): "
            f"{analysis.total_transactions} tx, {analysis.active_networks}/{len(networks)} networks, "
            f"{analysis.wallet_age} days in {time.time() - start_time:.2f}s"
        )

        self.cache.set(cache_key, analysis, self.ttl)
        return analysis
