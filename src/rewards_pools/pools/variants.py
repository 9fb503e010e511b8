"""Reward accrual variants and the tag -> variant dispatch table."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, NamedTuple

from rewards_pools.core.models import PoolType
from rewards_pools.data.abis import AUTO_REWARDS_ABI, REWARDS_ABI

if TYPE_CHECKING:
    from rewards_pools.pools.base import RewardsPool


class PoolVariant(NamedTuple):
    """
    Behaviour table for one kind of rewards pool.

    Attributes
    ----------
    pool_type : PoolType
        Variant tag
    abi : list[dict[str, Any]]
        ABI the pool contract is bound with
    earned_rewards : Callable
        Coroutine function ``(pool, address) -> int`` returning claimable rewards

    """

    pool_type: PoolType
    abi: list[dict[str, Any]]
    earned_rewards: Callable[["RewardsPool", str | None], Awaitable[int]]


async def _harvest_earned(pool: "RewardsPool", address: str | None) -> int:
    return await pool.contract.call("earned", address)


async def _auto_compounding_earned(pool: "RewardsPool", address: str | None) -> int:
    # Rewards are reinvested into the staked balance, nothing is claimable.
    return 0


HARVEST = PoolVariant(PoolType.HARVEST, REWARDS_ABI, _harvest_earned)
AUTO_COMPOUNDING = PoolVariant(PoolType.AUTO_COMPOUNDING, AUTO_REWARDS_ABI, _auto_compounding_earned)

VARIANTS: dict[str, PoolVariant] = {
    "harvest": HARVEST,
    "auto-compounding": AUTO_COMPOUNDING,
    "autocompounding": AUTO_COMPOUNDING,
}


def get_variant(pool_type: str | None) -> PoolVariant:
    """
    Resolve a descriptor's ``pool_type`` tag.

    Parameters
    ----------
    pool_type : str | None
        Tag from the registry

    Returns
    -------
    PoolVariant
        Matching variant; unknown or missing tags fall back to harvest

    """
    if not pool_type:
        return HARVEST
    return VARIANTS.get(pool_type.strip().lower(), HARVEST)
