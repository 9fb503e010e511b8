"""Tests for DeFiLlama pricing and the price cache."""

import asyncio
import time
from decimal import Decimal

import httpx
import pytest

from rewards_pools.pricing import DeFiLlamaPricing, PriceCache
from rewards_pools.pricing.cache import CacheEntry

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def _transport(requests, coins=None, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json={"coins": coins or {}})

    return httpx.MockTransport(handler)


def test_get_prices():
    requests = []
    coins = {
        f"ethereum:{WETH}": {"price": 3500.25, "symbol": "WETH"},
        f"ethereum:{USDC}": {"price": 1.0, "symbol": "USDC"},
    }

    async def run():
        async with DeFiLlamaPricing(transport=_transport(requests, coins)) as pricing:
            return await pricing.get_prices([("ethereum", WETH), ("ethereum", USDC)])

    prices = asyncio.run(run())

    assert prices == {("ethereum", WETH): Decimal("3500.25"), ("ethereum", USDC): Decimal("1.0")}
    assert len(requests) == 1
    assert requests[0].url.path == f"/prices/current/ethereum:{WETH},ethereum:{USDC}"


def test_missing_price_is_zero():
    async def run():
        async with DeFiLlamaPricing(transport=_transport([])) as pricing:
            return await pricing.get_price("ethereum", WETH)

    assert asyncio.run(run()) == Decimal("0")


def test_prices_are_cached():
    requests = []
    coins = {f"ethereum:{WETH}": {"price": 3500}}

    async def run():
        async with DeFiLlamaPricing(transport=_transport(requests, coins)) as pricing:
            first = await pricing.get_price("ethereum", WETH)
            second = await pricing.get_price("ethereum", WETH.lower())
            return first, second

    assert asyncio.run(run()) == (Decimal("3500"), Decimal("3500"))
    assert len(requests) == 1


def test_http_error_propagates():
    async def run():
        async with DeFiLlamaPricing(transport=_transport([], status_code=502)) as pricing:
            return await pricing.get_price("ethereum", WETH)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(run())


def test_empty_request():
    pricing = DeFiLlamaPricing(transport=_transport([]))

    assert asyncio.run(pricing.get_prices([])) == {}


def test_cache_entry_expiry():
    assert not CacheEntry(Decimal("1"), ttl=60).is_expired()
    assert CacheEntry(Decimal("1"), ttl=60, created_at=time.time() - 120).is_expired()


def test_price_cache_drops_expired_entries():
    cache = PriceCache(default_ttl=60)
    cache.set("ethereum", WETH, Decimal("3500"))
    cache._cache[("ethereum", WETH.lower())].created_at = time.time() - 120

    assert cache.get("ethereum", WETH) is None
    assert len(cache) == 0


def test_price_cache_honours_zero_ttl():
    cache = PriceCache(default_ttl=60)
    cache.set("ethereum", WETH, Decimal("3500"), ttl=0)
    entry = cache._cache[("ethereum", WETH.lower())]

    assert entry.ttl == 0
    entry.created_at -= 1
    assert cache.get("ethereum", WETH) is None


def test_price_cache_uses_default_ttl():
    cache = PriceCache(default_ttl=60)
    cache.set("ethereum", WETH, Decimal("3500"))

    assert cache._cache[("ethereum", WETH.lower())].ttl == 60
