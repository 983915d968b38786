# Reputation score calculator: tiered wallet age, activity and multichain bands

import logging
from typing import Any, Dict, List, Tuple

from api.models.data_models import ReputationScore, ScoreBreakdown, WalletAnalysis
from utils.constants import (
    WALLET_AGE_BANDS, TRANSACTION_BANDS, MULTICHAIN_BANDS, TIERS,
    ELIGIBLE_THRESHOLD, MAX_WALLET_AGE_SCORE, MAX_TRANSACTION_SCORE,
    MAX_MULTICHAIN_BONUS, MAX_TOTAL_SCORE, SCORING_DESCRIPTIONS
)

logger = logging.getLogger(__name__)


def _band_lookup(value: int, bands: List[Tuple[int, Any]]) -> Any:
    """First band whose inclusive lower bound is <= value"""
    for lower_bound, result in bands:
        if value >= lower_bound:
            return result
    return bands[-1][1]


def wallet_age_score(wallet_age_days: int) -> int:
    return _band_lookup(wallet_age_days, WALLET_AGE_BANDS)


def transaction_score(total_transactions: int) -> int:
    return _band_lookup(total_transactions, TRANSACTION_BANDS)


def multichain_bonus(active_networks: int) -> int:
    return _band_lookup(active_networks, MULTICHAIN_BANDS)


def determine_tier(score: int) -> str:
    return _band_lookup(score, TIERS)


def is_eligible(score: int) -> bool:
    return score >= ELIGIBLE_THRESHOLD


def calculate_quick_score(wallet_age_days: int, total_transactions: int, active_networks: int) -> int:
    """Total score without a breakdown; same bands as the full score"""
    return (
        wallet_age_score(wallet_age_days)
        + transaction_score(total_transactions)
        + multichain_bonus(active_networks)
    )


class ScoreCalculator:
    """Deterministic reputation scoring, no I/O"""

    def calculate_breakdown(self, wallet_age_days: int, total_transactions: int,
                            active_networks: int) -> ScoreBreakdown:
        age = wallet_age_score(wallet_age_days)
        tx = transaction_score(total_transactions)
        bonus = multichain_bonus(active_networks)

        return ScoreBreakdown(
            wallet_age_score=age,
            transaction_score=tx,
            multichain_bonus=bonus,
            total_score=age + tx + bonus,
            max_score=MAX_TOTAL_SCORE,
        )

    def calculate_score(self, analysis: WalletAnalysis) -> ReputationScore:
        """Calculate reputation score from wallet analysis"""
        breakdown = self.calculate_breakdown(
            analysis.wallet_age, analysis.total_transactions, analysis.active_networks
        )
        total = breakdown.total_score

        return ReputationScore(
            wallet_address=analysis.wallet_address,
            score=total,
            breakdown=breakdown,
            eligible=is_eligible(total),
            tier=determine_tier(total),
            analysis=analysis,
        )

    def get_scoring_formula(self) -> Dict[str, Any]:
        """Scoring formula explanation for clients"""
        return {
            'maxScore': MAX_TOTAL_SCORE,
            'eligibleThreshold': ELIGIBLE_THRESHOLD,
            'components': {
                'walletAge': {
                    'maxScore': MAX_WALLET_AGE_SCORE,
                    'tiers': SCORING_DESCRIPTIONS['walletAge'],
                },
                'transactions': {
                    'maxScore': MAX_TRANSACTION_SCORE,
                    'tiers': SCORING_DESCRIPTIONS['transactions'],
                },
                'multichainBonus': {
                    'maxScore': MAX_MULTICHAIN_BONUS,
                    'tiers': SCORING_DESCRIPTIONS['multichainBonus'],
                },
            },
            'tiers': SCORING_DESCRIPTIONS['tiers'],
        }
