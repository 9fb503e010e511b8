"""Uniform access to on-chain staking and rewards pools."""

from rewards_pools.core import NoSignerError, PoolDescriptor, PoolType, Summary
from rewards_pools.pools import (
    RewardsPool,
    active_pools,
    all_past_pools,
    from_pool,
    inactive_pools,
    known_pools,
    week_one,
    week_two,
)

__version__ = "0.1.0"

__all__ = [
    "NoSignerError",
    "PoolDescriptor",
    "PoolType",
    "RewardsPool",
    "Summary",
    "active_pools",
    "all_past_pools",
    "from_pool",
    "inactive_pools",
    "known_pools",
    "week_one",
    "week_two",
]
