"""Pool registry and contract ABIs."""

from rewards_pools.data.abis import AUTO_REWARDS_ABI, ERC20_ABI, REWARDS_ABI, SHARE_TOKEN_ABI
from rewards_pools.data.loader import PoolRegistry, load_registry, parse_registry

__all__ = [
    "AUTO_REWARDS_ABI",
    "ERC20_ABI",
    "REWARDS_ABI",
    "SHARE_TOKEN_ABI",
    "PoolRegistry",
    "load_registry",
    "parse_registry",
]
