import asyncio
import logging
from typing import Dict, List, Optional

from api.models.data_models import NetworkActivity, TransferRef
from services.blockchain.alchemy_client import UpstreamError
from services.blockchain.base import NetworkClient, DIRECTION_SENT, DIRECTION_RECEIVED
from services.cache.cache_store import CacheStore, CacheKeys
from utils.constants import Network, NETWORKS, transfer_categories
from utils.web3_utils import shorten_address

logger = logging.getLogger(__name__)


class NetworkActivityFetcher:
    """Per-network activity lookup with read-through caching.

    ``fetch_activity`` never raises for upstream problems: a failed lookup
    yields a zero-activity record carrying the error message, and that
    degraded record is cached like a successful one.
    """

    def __init__(self, clients: Dict[Network, NetworkClient], cache: CacheStore,
                 ttl: float = 300, timeout: Optional[float] = None):
        self.clients = clients
        self.cache = cache
        self.ttl = ttl
        self.timeout = timeout

    async def fetch_activity(self, wallet_address: str, network: Network) -> NetworkActivity:
        cache_key = CacheKeys.network_tx(wallet_address, network.value)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        descriptor = NETWORKS[network]
        try:
            if self.timeout:
                activity = await asyncio.wait_for(
                    self._query_network(wallet_address, network), timeout=self.timeout
                )
            else:
                activity = await self._query_network(wallet_address, network)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.warning(
                f"Error getting activity for {descriptor.name} "
                f"({shorten_address(wallet_address)}): {message}"
            )
            activity = NetworkActivity(
                network=descriptor.name,
                chain_id=descriptor.chain_id,
                transaction_count=0,
                error=message,
            )

        self.cache.set(cache_key, activity, self.ttl)
        return activity

    async def _query_network(self, wallet_address: str, network: Network) -> NetworkActivity:
        descriptor = NETWORKS[network]
        client = self.clients[network]

        tx_count = await client.get_transaction_count(wallet_address)
        if tx_count < 0:
            raise UpstreamError(f"Negative transaction count from {descriptor.name}")

        first_ts = None
        last_ts = None

        # Zero count needs no timestamp probes
        if tx_count > 0:
            categories = transfer_categories(network)
            first_ts, last_ts = await asyncio.gather(
                self._first_timestamp(client, wallet_address, categories),
                self._last_timestamp(client, wallet_address, categories),
            )

        return NetworkActivity(
            network=descriptor.name,
            chain_id=descriptor.chain_id,
            transaction_count=tx_count,
            first_transaction=first_ts,
            last_transaction=last_ts,
        )

    async def _first_timestamp(self, client: NetworkClient, wallet_address: str,
                               categories: List[str]) -> Optional[int]:
        # Oldest interaction may be outgoing or incoming, probe both sides
        sent, received = await asyncio.gather(
            client.get_earliest_transfer(wallet_address, DIRECTION_SENT, categories),
            client.get_earliest_transfer(wallet_address, DIRECTION_RECEIVED, categories),
        )
        oldest = _pick_block(sent, received, min)
        if oldest is None:
            return None
        return await client.get_block_timestamp(oldest.block_number)

    async def _last_timestamp(self, client: NetworkClient, wallet_address: str,
                              categories: List[str]) -> Optional[int]:
        sent, received = await asyncio.gather(
            client.get_latest_transfer(wallet_address, DIRECTION_SENT, categories),
            client.get_latest_transfer(wallet_address, DIRECTION_RECEIVED, categories),
        )
        newest = _pick_block(sent, received, max)
        if newest is None:
            return None
        return await client.get_block_timestamp(newest.block_number)


def _pick_block(a: Optional[TransferRef], b: Optional[TransferRef], choose) -> Optional[TransferRef]:
    candidates = [t for t in (a, b) if t is not None]
    if not candidates:
        return None
    return choose(candidates, key=lambda t: t.block_number)
