"""Core models, errors, and unit helpers."""

from rewards_pools.core.errors import NoSignerError
from rewards_pools.core.models import Asset, PoolDescriptor, PoolType, Summary
from rewards_pools.core.units import MAX_UINT256, WEI_PER_ETHER, format_units

__all__ = [
    "MAX_UINT256",
    "WEI_PER_ETHER",
    "Asset",
    "NoSignerError",
    "PoolDescriptor",
    "PoolType",
    "Summary",
    "format_units",
]
