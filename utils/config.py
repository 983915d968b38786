import os
from typing import List, Dict
import logging

from utils.constants import NETWORKS, Network, ELIGIBLE_THRESHOLD, MAX_TOTAL_SCORE

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default


class Config:
    """Configuration management for the reputation function"""

    def __init__(self):

        # API configuration
        self.alchemy_api_key = os.getenv('ALCHEMY_API_KEY')

        # General settings
        self.environment = os.getenv('ENVIRONMENT', 'production')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')

        # Cache TTLs (seconds)
        self.network_activity_ttl = _env_int('NETWORK_ACTIVITY_TTL_SECONDS', 300)
        self.wallet_analysis_ttl = _env_int('WALLET_ANALYSIS_TTL_SECONDS', 300)
        self.reputation_ttl = _env_int('REPUTATION_TTL_SECONDS', 300)

        # Upstream limits
        self.batch_window_size = _env_int('BATCH_WINDOW_SIZE', 5)
        self.upstream_timeout_seconds = _env_float('UPSTREAM_TIMEOUT_SECONDS', 15.0)
        self.max_batch_wallets = _env_int('MAX_BATCH_WALLETS', 100)

        # Scoring constants (not configurable)
        self.eligible_threshold = ELIGIBLE_THRESHOLD
        self.max_score = MAX_TOTAL_SCORE

        # API configurations
        self.alchemy_endpoints: Dict[Network, str] = {
            network: f'https://{descriptor.alchemy_host}.g.alchemy.com/v2/{self.alchemy_api_key}'
            for network, descriptor in NETWORKS.items()
        }

        logger.info(f"Environment: {self.environment}")
        logger.info(f"Networks configured: {len(self.alchemy_endpoints)}")
        logger.info(
            f"Cache TTLs: network={self.network_activity_ttl}s, "
            f"analysis={self.wallet_analysis_ttl}s, reputation={self.reputation_ttl}s"
        )

    def get_endpoint(self, network: Network) -> str:
        """Get Alchemy JSON-RPC endpoint for a network"""
        return self.alchemy_endpoints[network]

    def validate(self) -> List[str]:
        """Validate configuration and return any errors"""
        errors = []

        # Alchemy API validation
        if not self.alchemy_api_key:
            errors.append("ALCHEMY_API_KEY not configured")

        for name in ('network_activity_ttl', 'wallet_analysis_ttl', 'reputation_ttl'):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive")

        if self.batch_window_size < 1:
            errors.append("BATCH_WINDOW_SIZE must be at least 1")

        if self.upstream_timeout_seconds <= 0:
            errors.append("UPSTREAM_TIMEOUT_SECONDS must be positive")

        if self.max_batch_wallets < 1:
            errors.append("MAX_BATCH_WALLETS must be at least 1")

        return errors
