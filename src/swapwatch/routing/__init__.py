"""Competitor comparison for Garden swaps.

Adapters:
- Chainflip: broker quotes (amounts only, valued with settlement prices)
- THORSwap: aggregator routes, best expected output selected
- Relay: bridge/swap quotes with USD values
"""

from swapwatch.routing.base import (
    ComparisonAggregator,
    ComparisonMetric,
    ComparisonResult,
    ProviderAdapter,
)
from swapwatch.routing.chainflip import ChainflipAdapter
from swapwatch.routing.factory import create_default_aggregator
from swapwatch.routing.mappings import UNSUPPORTED, ProviderAsset, SwapPlatform, lookup
from swapwatch.routing.relay import RelayAdapter
from swapwatch.routing.thorswap import ThorSwapAdapter

__all__ = [
    # Base classes
    "ComparisonAggregator",
    "ComparisonMetric",
    "ComparisonResult",
    "ProviderAdapter",
    # Adapters
    "ChainflipAdapter",
    "RelayAdapter",
    "ThorSwapAdapter",
    # Mappings
    "ProviderAsset",
    "SwapPlatform",
    "UNSUPPORTED",
    "lookup",
    # Factory
    "create_default_aggregator",
]
