import aiohttp
import logging
from typing import Any, Dict, List, Optional

from api.models.data_models import TransferRef
from services.blockchain.base import NetworkClient, DIRECTION_SENT, DIRECTION_RECEIVED
from utils.config import Config
from utils.constants import Network, NETWORKS
from utils.web3_utils import parse_hex_int

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Alchemy returned an error or an unusable payload"""


class AlchemyService(NetworkClient):
    """Alchemy JSON-RPC client for one network"""

    def __init__(self, config: Config, network: Network):
        self.config = config
        self.network = network
        self.descriptor = NETWORKS[network]
        self.base_url = config.get_endpoint(network)
        self.timeout = aiohttp.ClientTimeout(total=config.upstream_timeout_seconds)
        self._request_id = 0

    async def _rpc(self, method: str, params: List[Any]) -> Any:
        """Single JSON-RPC call, returns the 'result' member"""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params
        }

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.base_url, json=payload) as response:
                if response.status != 200:
                    raise UpstreamError(
                        f"{self.descriptor.name} {method} failed with HTTP {response.status}"
                    )
                data = await response.json(content_type=None)

        if not isinstance(data, dict):
            raise UpstreamError(f"{self.descriptor.name} {method} returned malformed payload")

        if data.get('error'):
            error = data['error']
            message = error.get('message') if isinstance(error, dict) else str(error)
            raise UpstreamError(f"{self.descriptor.name} {method} error: {message}")

        if 'result' not in data:
            raise UpstreamError(f"{self.descriptor.name} {method} response has no result")

        return data['result']

    async def get_transaction_count(self, address: str) -> int:
        result = await self._rpc("eth_getTransactionCount", [address, "latest"])
        try:
            count = parse_hex_int(result)
        except (ValueError, TypeError) as e:
            raise UpstreamError(f"Invalid transaction count {result!r}") from e
        if count < 0:
            raise UpstreamError(f"Negative transaction count {count}")
        return count

    def _transfer_params(self, address: str, direction: str,
                         categories: List[str], order: str) -> Dict[str, Any]:
        params = {
            "fromBlock": "0x0",
            "toBlock": "latest",
            "category": list(categories),
            "withMetadata": False,
            "excludeZeroValue": False,
            "maxCount": "0x1",
            "order": order
        }
        if direction == DIRECTION_SENT:
            params["fromAddress"] = address
        elif direction == DIRECTION_RECEIVED:
            params["toAddress"] = address
        else:
            raise ValueError(f"Unknown transfer direction: {direction}")
        return params

    async def _first_transfer(self, address: str, direction: str,
                              categories: List[str], order: str) -> Optional[TransferRef]:
        params = self._transfer_params(address, direction, categories, order)
        result = await self._rpc("alchemy_getAssetTransfers", [params])

        if not isinstance(result, dict):
            raise UpstreamError("alchemy_getAssetTransfers returned malformed result")

        transfers = result.get('transfers', [])
        if not transfers:
            return None

        transfer = transfers[0]
        try:
            block_number = parse_hex_int(transfer.get('blockNum'))
        except (ValueError, TypeError) as e:
            raise UpstreamError(f"Invalid blockNum in transfer: {transfer!r}") from e

        return TransferRef(block_number=block_number, tx_hash=transfer.get('hash', ''))

    async def get_earliest_transfer(self, address: str, direction: str,
                                    categories: List[str]) -> Optional[TransferRef]:
        return await self._first_transfer(address, direction, categories, "asc")

    async def get_latest_transfer(self, address: str, direction: str,
                                  categories: List[str]) -> Optional[TransferRef]:
        return await self._first_transfer(address, direction, categories, "desc")

    async def get_block_timestamp(self, block_number: int) -> int:
        block = await self._rpc("eth_getBlockByNumber", [hex(block_number), False])
        if not isinstance(block, dict) or 'timestamp' not in block:
            raise UpstreamError(f"Block {block_number} not found on {self.descriptor.name}")
        try:
            return parse_hex_int(block['timestamp'])
        except (ValueError, TypeError) as e:
            raise UpstreamError(f"Invalid timestamp for block {block_number}") from e


def build_network_clients(config: Config) -> Dict[Network, NetworkClient]:
    """One Alchemy client per supported network"""
    clients = {network: AlchemyService(config, network) for network in NETWORKS}
    logger.info(f"Initialized {len(clients)} Alchemy clients for multichain support")
    return clients
