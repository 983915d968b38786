from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Tuple


@dataclass(frozen=True)
class TransferRef:
    """Position of a single asset transfer"""
    block_number: int
    tx_hash: str = ""


@dataclass(frozen=True)
class NetworkActivity:
    network: str
    chain_id: int
    transaction_count: int
    first_transaction: Optional[int] = None
    last_transaction: Optional[int] = None
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = {
            'network': self.network,
            'chainId': self.chain_id,
            'transactionCount': self.transaction_count,
            'firstTransaction': self.first_transaction,
            'lastTransaction': self.last_transaction,
        }
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass(frozen=True)
class WalletAnalysis:
    wallet_address: str
    wallet_age: int
    first_transaction_timestamp: Optional[int]
    total_transactions: int
    active_networks: int
    network_activities: Tuple[NetworkActivity, ...]
    analyzed_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'walletAddress': self.wallet_address,
            'walletAge': self.wallet_age,
            'firstTransactionTimestamp': self.first_transaction_timestamp,
            'totalTransactions': self.total_transactions,
            'activeNetworks': self.active_networks,
            'networkActivities': [a.to_dict() for a in self.network_activities],
            'analyzedAt': self.analyzed_at,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    wallet_age_score: int
    transaction_score: int
    multichain_bonus: int
    total_score: int
    max_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'walletAgeScore': self.wallet_age_score,
            'transactionScore': self.transaction_score,
            'multichainBonus': self.multichain_bonus,
            'totalScore': self.total_score,
            'maxScore': self.max_score,
        }


@dataclass(frozen=True)
class ReputationScore:
    wallet_address: str
    score: int
    breakdown: ScoreBreakdown
    eligible: bool
    tier: str
    analysis: WalletAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            'walletAddress': self.wallet_address,
            'score': self.score,
            'breakdown': self.breakdown.to_dict(),
            'eligible': self.eligible,
            'tier': self.tier,
            'analysis': self.analysis.to_dict(),
        }


@dataclass(frozen=True)
class QuickReputation:
    wallet_address: str
    score: int
    eligible: bool
    tier: str
    wallet_age: int
    total_transactions: int
    active_networks: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'walletAddress': self.wallet_address,
            'score': self.score,
            'eligible': self.eligible,
            'tier': self.tier,
            'walletAge': self.wallet_age,
            'totalTransactions': self.total_transactions,
            'activeNetworks': self.active_networks,
        }

    def to_status_dict(self) -> Dict[str, Any]:
        """Projection used by the status endpoint"""
        data = self.to_dict()
        data.pop('tier')
        return data


@dataclass(frozen=True)
class BatchItemError:
    wallet_address: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {'walletAddress': self.wallet_address, 'error': self.error}


@dataclass
class CacheStats:
    entry_count: int
    hits: int = 0
    misses: int = 0
    expired: int = 0
    keys: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entryCount': self.entry_count,
            'hits': self.hits,
            'misses': self.misses,
            'expired': self.expired,
            'keys': list(self.keys),
        }
