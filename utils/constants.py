from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Any


class Network(Enum):
    ETHEREUM = "ETHEREUM"
    POLYGON = "POLYGON"
    ARBITRUM = "ARBITRUM"
    OPTIMISM = "OPTIMISM"
    BASE = "BASE"
    POLYGON_ZKEVM = "POLYGON_ZKEVM"


@dataclass(frozen=True)
class NetworkDescriptor:
    key: Network
    name: str
    chain_id: int
    supports_internal: bool
    alchemy_host: str


# Static network table (order is the order of analysis output)
NETWORKS: Dict[Network, NetworkDescriptor] = {
    Network.ETHEREUM: NetworkDescriptor(Network.ETHEREUM, 'Ethereum', 1, True, 'eth-mainnet'),
    Network.POLYGON: NetworkDescriptor(Network.POLYGON, 'Polygon', 137, True, 'polygon-mainnet'),
    Network.ARBITRUM: NetworkDescriptor(Network.ARBITRUM, 'Arbitrum', 42161, False, 'arb-mainnet'),
    Network.OPTIMISM: NetworkDescriptor(Network.OPTIMISM, 'Optimism', 10, False, 'opt-mainnet'),
    Network.BASE: NetworkDescriptor(Network.BASE, 'Base', 8453, False, 'base-mainnet'),
    Network.POLYGON_ZKEVM: NetworkDescriptor(Network.POLYGON_ZKEVM, 'Polygon zkEVM', 1101, False, 'polygonzkevm-mainnet'),
}

ALL_NETWORKS: Tuple[Network, ...] = tuple(NETWORKS.keys())

# Quick mode skips the zk-rollup
QUICK_NETWORKS: Tuple[Network, ...] = (
    Network.ETHEREUM,
    Network.ARBITRUM,
    Network.POLYGON,
    Network.OPTIMISM,
    Network.BASE,
)

# Alchemy asset transfer categories
CATEGORY_EXTERNAL = 'external'
CATEGORY_INTERNAL = 'internal'
CATEGORY_ERC20 = 'erc20'
CATEGORY_ERC721 = 'erc721'
CATEGORY_ERC1155 = 'erc1155'

BASE_TRANSFER_CATEGORIES: Tuple[str, ...] = (
    CATEGORY_EXTERNAL, CATEGORY_ERC20, CATEGORY_ERC721, CATEGORY_ERC1155
)
INTERNAL_TRANSFER_CATEGORIES: Tuple[str, ...] = (
    CATEGORY_EXTERNAL, CATEGORY_INTERNAL, CATEGORY_ERC20, CATEGORY_ERC721, CATEGORY_ERC1155
)


def transfer_categories(network: Network) -> List[str]:
    """Categories probed for first/last activity on a network"""
    if NETWORKS[network].supports_internal:
        return list(INTERNAL_TRANSFER_CATEGORIES)
    return list(BASE_TRANSFER_CATEGORIES)


SECONDS_PER_DAY = 24 * 60 * 60

# Scoring
ELIGIBLE_THRESHOLD = 100
MAX_WALLET_AGE_SCORE = 60
MAX_TRANSACTION_SCORE = 110
MAX_MULTICHAIN_BONUS = 50
MAX_TOTAL_SCORE = MAX_WALLET_AGE_SCORE + MAX_TRANSACTION_SCORE + MAX_MULTICHAIN_BONUS

# (lower bound inclusive, points); first matching band from the top wins
WALLET_AGE_BANDS: List[Tuple[int, int]] = [
    (366, 60),
    (181, 55),
    (91, 45),
    (31, 35),
    (7, 20),
    (0, 15),
]

TRANSACTION_BANDS: List[Tuple[int, int]] = [
    (501, 110),
    (101, 95),
    (51, 80),
    (21, 65),
    (5, 55),
    (0, 15),
]

MULTICHAIN_BANDS: List[Tuple[int, int]] = [
    (5, 50),
    (4, 40),
    (3, 35),
    (2, 30),
    (0, 10),
]

TIERS: List[Tuple[int, str]] = [
    (150, 'Expert'),
    (100, 'Advanced'),
    (70, 'Intermediate'),
    (50, 'Beginner'),
    (0, 'Suspicious'),
]

# Human readable formula, served by the formula endpoint
SCORING_DESCRIPTIONS: Dict[str, List[Dict[str, Any]]] = {
    'walletAge': [
        {'range': '< 7 days', 'score': 15, 'description': 'Very new wallet'},
        {'range': '7-30 days', 'score': 20, 'description': 'New wallet'},
        {'range': '31-90 days', 'score': 35, 'description': 'Young wallet'},
        {'range': '91-180 days', 'score': 45, 'description': 'Maturing wallet'},
        {'range': '181-365 days', 'score': 55, 'description': 'Established wallet'},
        {'range': '> 365 days', 'score': 60, 'description': 'Veteran wallet'},
    ],
    'transactions': [
        {'range': '< 5 tx', 'score': 15, 'description': 'Minimal activity'},
        {'range': '5-20 tx', 'score': 55, 'description': 'Low activity'},
        {'range': '21-50 tx', 'score': 65, 'description': 'Moderate activity'},
        {'range': '51-100 tx', 'score': 80, 'description': 'Good activity'},
        {'range': '101-500 tx', 'score': 95, 'description': 'High activity'},
        {'range': '> 500 tx', 'score': 110, 'description': 'Very high activity, power user'},
    ],
    'multichainBonus': [
        {'range': '0-1 network', 'score': 10, 'description': 'Single chain user'},
        {'range': '2 networks', 'score': 30, 'description': 'Starting to explore'},
        {'range': '3 networks', 'score': 35, 'description': 'Multi-chain user'},
        {'range': '4 networks', 'score': 40, 'description': 'Advanced multi-chain user'},
        {'range': '5+ networks', 'score': 50, 'description': 'Cross-chain power user'},
    ],
    'tiers': [
        {'name': 'Suspicious', 'range': '< 50', 'description': 'Very low activity'},
        {'name': 'Beginner', 'range': '50-69', 'description': 'New user'},
        {'name': 'Intermediate', 'range': '70-99', 'description': 'Regular user, not eligible yet'},
        {'name': 'Advanced', 'range': '100-149', 'description': 'Eligible user'},
        {'name': 'Expert', 'range': '150-220', 'description': 'Power user, highly trusted'},
    ],
}

# Cache key prefixes
CACHE_PREFIX_NETWORK = 'network_tx'
CACHE_PREFIX_ANALYSIS = 'wallet_analysis'
CACHE_PREFIX_SCORE = 'wallet_score'

# Network display mapping for health endpoint
NETWORK_DISPLAY: Dict[str, Dict[str, Any]] = {
    descriptor.key.value.lower(): {
        'name': descriptor.name,
        'chain_id': descriptor.chain_id,
        'internal_transfers': descriptor.supports_internal,
    }
    for descriptor in NETWORKS.values()
}
