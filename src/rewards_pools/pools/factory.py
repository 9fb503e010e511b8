"""Build rewards pools from registry descriptors."""

from collections.abc import Iterable

from rewards_pools.core.models import PoolDescriptor
from rewards_pools.data.loader import PoolRegistry, load_registry
from rewards_pools.pools.base import RewardsPool
from rewards_pools.pools.variants import get_variant
from rewards_pools.rpc.contract import Connection


def from_pool(
    descriptor: PoolDescriptor,
    connection: Connection,
    registry: PoolRegistry | None = None,
) -> RewardsPool:
    """
    Build the pool matching a descriptor's ``pool_type``.

    ``"auto-compounding"`` yields an auto-compounding pool; any other value,
    including a missing or unrecognised tag, yields a harvest pool.

    Parameters
    ----------
    descriptor : PoolDescriptor
        Registry record
    connection : Connection
        Connection the pool's contract is bound to
    registry : PoolRegistry | None
        Registry used for the active flag

    Returns
    -------
    RewardsPool
        Pool bound to a new contract handle

    """
    return RewardsPool(descriptor, connection, variant=get_variant(descriptor.pool_type), registry=registry)


def _build(
    descriptors: Iterable[PoolDescriptor],
    connection: Connection,
    registry: PoolRegistry,
) -> list[RewardsPool]:
    return [from_pool(descriptor, connection, registry) for descriptor in descriptors]


def known_pools(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Every pool in the registry."""
    if registry is None:
        registry = load_registry()
    return _build(registry.pools, connection, registry)


def week_one(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Pools incentivised in week one."""
    if registry is None:
        registry = load_registry()
    return _build(registry.week_one_pools, connection, registry)


def week_two(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Pools incentivised in week two."""
    if registry is None:
        registry = load_registry()
    return _build(registry.week_two_pools, connection, registry)


def active_pools(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Pools currently receiving rewards."""
    if registry is None:
        registry = load_registry()
    return _build(registry.active_pools, connection, registry)


def inactive_pools(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Pools no longer receiving rewards."""
    if registry is None:
        registry = load_registry()
    return _build(registry.inactive_pools, connection, registry)


def all_past_pools(connection: Connection, registry: PoolRegistry | None = None) -> list[RewardsPool]:
    """Every pool that took part in an incentive week."""
    if registry is None:
        registry = load_registry()
    return _build(registry.all_past_pools, connection, registry)


COHORTS = {
    "all": known_pools,
    "active": active_pools,
    "inactive": inactive_pools,
    "week-one": week_one,
    "week-two": week_two,
    "past": all_past_pools,
}
