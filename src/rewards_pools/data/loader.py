"""Pool registry loading from YAML."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from rewards_pools.core.models import Asset, PoolDescriptor

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).parent / "pools.yaml"
REGISTRY_ENV_VAR = "REWARDS_POOLS_REGISTRY"


class PoolRegistry:
    """
    Static registry of deployed pools, partitioned into cohorts.

    Cohort properties return a new list on every access; the descriptors
    themselves are frozen and shared.

    Parameters
    ----------
    descriptors : list[PoolDescriptor]
        All known pools, in registry order
    chain : str
        Chain the pools are deployed on
    network : str
        Network name

    """

    def __init__(
        self,
        descriptors: list[PoolDescriptor],
        chain: str = "ethereum",
        network: str = "mainnet",
    ) -> None:
        self._descriptors = tuple(descriptors)
        self.chain = chain
        self.network = network
        self._active = frozenset(d.address.lower() for d in self._descriptors if d.active)

    @property
    def pools(self) -> list[PoolDescriptor]:
        """Every known pool."""
        return list(self._descriptors)

    @property
    def week_one_pools(self) -> list[PoolDescriptor]:
        """Pools incentivised in week one."""
        return self._in_week(1)

    @property
    def week_two_pools(self) -> list[PoolDescriptor]:
        """Pools incentivised in week two."""
        return self._in_week(2)

    @property
    def active_pools(self) -> list[PoolDescriptor]:
        """Pools currently receiving rewards."""
        return [d for d in self._descriptors if d.active]

    @property
    def inactive_pools(self) -> list[PoolDescriptor]:
        """Pools no longer receiving rewards."""
        return [d for d in self._descriptors if not d.active]

    @property
    def all_past_pools(self) -> list[PoolDescriptor]:
        """Every pool that took part in at least one incentive week."""
        return [d for d in self._descriptors if d.weeks]

    def _in_week(self, week: int) -> list[PoolDescriptor]:
        return [d for d in self._descriptors if week in d.weeks]

    def is_address_active(self, address: str) -> bool:
        """
        Check whether a pool address is currently active.

        Parameters
        ----------
        address : str
            Pool address (any checksum casing)

        Returns
        -------
        bool
            True if the address belongs to an active pool

        """
        return address.lower() in self._active

    def get(self, address: str) -> PoolDescriptor | None:
        """Look up a descriptor by pool address (case-insensitive)."""
        address_lower = address.lower()
        for descriptor in self._descriptors:
            if descriptor.address.lower() == address_lower:
                return descriptor
        return None

    def __len__(self) -> int:
        return len(self._descriptors)


def _resolve_asset(key: str, raw_assets: dict[str, dict[str, Any]], seen: tuple[str, ...] = ()) -> Asset:
    if key in seen:
        msg = f"Circular underlying reference for asset '{key}'"
        raise ValueError(msg)
    try:
        raw = dict(raw_assets[key])
    except KeyError:
        msg = f"Unknown asset '{key}' in pool registry"
        raise KeyError(msg) from None

    underlying = raw.pop("underlying", None)
    if underlying is not None:
        raw["underlying"] = _resolve_asset(underlying, raw_assets, (*seen, key))
    return Asset(**raw)


def parse_registry(data: dict[str, Any]) -> PoolRegistry:
    """
    Build a registry from parsed YAML data.

    Parameters
    ----------
    data : dict[str, Any]
        Mapping with ``assets`` (key -> asset fields) and ``pools`` (list of
        descriptors whose ``asset``/``reward_asset`` are asset keys)

    Returns
    -------
    PoolRegistry
        Validated registry

    Raises
    ------
    KeyError
        If a pool references an undeclared asset
    pydantic.ValidationError
        If an asset or pool entry is malformed

    """
    raw_assets = data.get("assets", {})
    descriptors = []
    for raw_pool in data.get("pools", []):
        pool = dict(raw_pool)
        pool["asset"] = _resolve_asset(pool["asset"], raw_assets)
        pool["reward_asset"] = _resolve_asset(pool["reward_asset"], raw_assets)
        pool["weeks"] = tuple(pool.get("weeks") or ())
        descriptors.append(PoolDescriptor(**pool))

    return PoolRegistry(
        descriptors,
        chain=data.get("chain", "ethereum"),
        network=data.get("network", "mainnet"),
    )


@lru_cache(maxsize=8)
def _load_registry_file(path: Path) -> PoolRegistry:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    registry = parse_registry(data)
    logger.debug("Loaded %d pools from %s", len(registry), path)
    return registry


def load_registry(path: str | Path | None = None) -> PoolRegistry:
    """
    Load the pool registry.

    Parameters
    ----------
    path : str | Path | None
        YAML file to load. Defaults to ``$REWARDS_POOLS_REGISTRY`` or the
        bundled ``pools.yaml``.

    Returns
    -------
    PoolRegistry
        Registry, loaded once per path and read-only afterwards

    """
    if path is None:
        path = os.environ.get(REGISTRY_ENV_VAR) or DEFAULT_REGISTRY_PATH
    return _load_registry_file(Path(path).resolve())
