"""Pricing services for token USD valuation."""

from rewards_pools.pricing.cache import PriceCache
from rewards_pools.pricing.defillama import DeFiLlamaPricing

__all__ = [
    "DeFiLlamaPricing",
    "PriceCache",
]
