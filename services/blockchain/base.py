from abc import ABC, abstractmethod
from typing import List, Optional

from api.models.data_models import TransferRef

DIRECTION_SENT = 'sent'
DIRECTION_RECEIVED = 'received'


class NetworkClient(ABC):
    """Read-only view of one network's activity for an address"""

    @abstractmethod
    async def get_transaction_count(self, address: str) -> int:
        """Number of transactions sent by the address"""
        pass

    @abstractmethod
    async def get_earliest_transfer(self, address: str, direction: str,
                                    categories: List[str]) -> Optional[TransferRef]:
        """Oldest transfer sent or received by the address, if any"""
        pass

    @abstractmethod
    async def get_latest_transfer(self, address: str, direction: str,
                                  categories: List[str]) -> Optional[TransferRef]:
        """Newest transfer sent or received by the address, if any"""
        pass

    @abstractmethod
    async def get_block_timestamp(self, block_number: int) -> int:
        """Block timestamp in epoch seconds"""
        pass
