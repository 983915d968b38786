import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from api.models.data_models import (
    BatchItemError, CacheStats, QuickReputation, ReputationScore, WalletAnalysis
)
from core.analysis.wallet_analyzer import AnalysisMode, WalletAnalyzer
from services.blockchain.activity_fetcher import NetworkActivityFetcher
from services.blockchain.alchemy_client import build_network_clients
from services.cache.cache_store import CacheStore, CacheKeys
from services.score.calculator import (
    ScoreCalculator, calculate_quick_score, determine_tier, is_eligible
)
from utils.config import Config
from utils.web3_utils import (
    InvalidWalletAddress, is_valid_wallet_address, validate_wallet_address, shorten_address
)

logger = logging.getLogger(__name__)

BatchResult = Union[QuickReputation, BatchItemError]


class ReputationHandler:
    """Composes wallet analysis and scoring for full, quick and batch checks"""

    def __init__(self, analyzer: WalletAnalyzer, calculator: ScoreCalculator,
                 cache: CacheStore, reputation_ttl: float = 300, batch_window_size: int = 5):
        if batch_window_size < 1:
            raise ValueError("batch_window_size must be at least 1")
        self.analyzer = analyzer
        self.calculator = calculator
        self.cache = cache
        self.reputation_ttl = reputation_ttl
        self.batch_window_size = batch_window_size

    async def get_full(self, wallet_address: str) -> ReputationScore:
        """Full reputation score with breakdown, across all networks"""
        wallet_address = validate_wallet_address(wallet_address)

        cache_key = CacheKeys.wallet_score(wallet_address)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        analysis = await self.analyzer.analyze(wallet_address, AnalysisMode.FULL)
        reputation = self.calculator.calculate_score(analysis)

        logger.info(
            f"Reputation {shorten_address(wallet_address)}: {reputation.score} "
            f"({reputation.tier}, eligible={reputation.eligible})"
        )

        self.cache.set(cache_key, reputation, self.reputation_ttl)
        return reputation

    async def get_quick(self, wallet_address: str) -> QuickReputation:
        """Quick check on the main networks only; may differ from the full score"""
        wallet_address = validate_wallet_address(wallet_address)

        analysis = await self.analyzer.analyze(wallet_address, AnalysisMode.QUICK)
        score = calculate_quick_score(
            analysis.wallet_age, analysis.total_transactions, analysis.active_networks
        )

        logger.info(f"Quick reputation {shorten_address(wallet_address)}: {score}")

        return QuickReputation(
            wallet_address=wallet_address,
            score=score,
            eligible=is_eligible(score),
            tier=determine_tier(score),
            wallet_age=analysis.wallet_age,
            total_transactions=analysis.total_transactions,
            active_networks=analysis.active_networks,
        )

    async def get_analysis(self, wallet_address: str) -> WalletAnalysis:
        return await self.analyzer.analyze(wallet_address, AnalysisMode.FULL)

    async def get_status(self, wallet_address: str) -> Dict[str, Any]:
        quick = await self.get_quick(wallet_address)
        return quick.to_status_dict()

    async def _quick_or_error(self, wallet_address: str) -> BatchResult:
        try:
            return await self.get_quick(wallet_address)
        except Exception as e:
            logger.error(f"Quick check failed for {shorten_address(wallet_address)}: {e}")
            return BatchItemError(wallet_address=wallet_address, error=str(e))

    async def batch_quick(self, wallet_addresses: Sequence[str]) -> List[BatchResult]:
        """Quick check many wallets, a window of wallets at a time.

        Malformed addresses are dropped; a failing wallet yields an error
        record in its slot. Output order follows the valid inputs.
        """
        valid_addresses = [addr for addr in wallet_addresses if is_valid_wallet_address(addr)]

        if not valid_addresses:
            raise InvalidWalletAddress("No valid wallet addresses provided")

        dropped = len(wallet_addresses) - len(valid_addresses)
        if dropped:
            logger.info(f"Batch: skipped {dropped} malformed addresses")

        results: List[BatchResult] = []
        size = self.batch_window_size

        for i in range(0, len(valid_addresses), size):
            window = valid_addresses[i:i + size]
            window_results = await asyncio.gather(*(self._quick_or_error(addr) for addr in window))
            results.extend(window_results)

        logger.info(f"Batch complete: {len(results)} wallets in windows of {size}")
        return results

    def get_scoring_formula(self) -> Dict[str, Any]:
        return self.calculator.get_scoring_formula()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self):
        self.cache.clear()


def build_reputation_handler(config: Config, cache: Optional[CacheStore] = None,
                             clients=None) -> ReputationHandler:
    """Wire the services for one process"""
    cache = cache if cache is not None else CacheStore()
    clients = clients if clients is not None else build_network_clients(config)

    fetcher = NetworkActivityFetcher(
        clients, cache,
        ttl=config.network_activity_ttl,
        timeout=config.upstream_timeout_seconds,
    )
    analyzer = WalletAnalyzer(fetcher, cache, ttl=config.wallet_analysis_ttl)

    return ReputationHandler(
        analyzer,
        ScoreCalculator(),
        cache,
        reputation_ttl=config.reputation_ttl,
        batch_window_size=config.batch_window_size,
    )
