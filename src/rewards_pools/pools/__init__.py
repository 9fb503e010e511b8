"""Rewards pools and the factories that build them."""

from rewards_pools.pools.base import RewardsPool
from rewards_pools.pools.factory import (
    COHORTS,
    active_pools,
    all_past_pools,
    from_pool,
    inactive_pools,
    known_pools,
    week_one,
    week_two,
)
from rewards_pools.pools.variants import AUTO_COMPOUNDING, HARVEST, PoolVariant, get_variant

__all__ = [
    "AUTO_COMPOUNDING",
    "COHORTS",
    "HARVEST",
    "PoolVariant",
    "RewardsPool",
    "active_pools",
    "all_past_pools",
    "from_pool",
    "get_variant",
    "inactive_pools",
    "known_pools",
    "week_one",
    "week_two",
]
