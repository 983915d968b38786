from services.cache.cache_store import CacheStore, CacheKeys
from services.blockchain.base import NetworkClient
from services.blockchain.alchemy_client import AlchemyService, UpstreamError, build_network_clients
from services.blockchain.activity_fetcher import NetworkActivityFetcher
from services.score.calculator import ScoreCalculator

__all__ = [
    'CacheStore',
    'CacheKeys',
    'NetworkClient',
    'AlchemyService',
    'UpstreamError',
    'build_network_clients',
    'NetworkActivityFetcher',
    'ScoreCalculator',
]
