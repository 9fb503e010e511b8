"""Pytest configuration and in-memory chain fakes for rewards-pools tests."""

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from rewards_pools.data import PoolRegistry, parse_registry

USER = "0x" + "11" * 20
SIGNER = "0x" + "22" * 20

LP_TOKEN = "0x" + "a1" * 20
REWARD_TOKEN = "0x" + "a2" * 20
USDC = "0x" + "a3" * 20
VAULT_SHARE = "0x" + "a4" * 20

HARVEST_POOL = "0x" + "b1" * 20
AUTO_POOL = "0x" + "b2" * 20
LEGACY_POOL = "0x" + "b3" * 20


def pytest_configure(config):
    """Disable ape plugin during tests."""
    # Unregister ape pytest plugin to avoid network connection issues
    config.pluginmanager.set_blocked("ape_test")


class FakeContract:
    """
    In-memory stand-in for an Ape contract.

    Exposes the pool, ERC-20 and share-token methods as plain callables
    reading from mutable state.

    """

    def __init__(self, address: str) -> None:
        self.address = address
        self.balances: dict[str, int] = {}
        self.allowed: dict[tuple[str, str], int] = {}
        self.earned_by: dict[str, int] = {}
        self.total = 0
        self.assets_per_share = (1, 1)

    def balanceOf(self, account: str) -> int:  # noqa: N802
        return self.balances.get(account, 0)

    def totalSupply(self) -> int:  # noqa: N802
        return self.total

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowed.get((owner, spender), 0)

    def earned(self, account: str) -> int:
        return self.earned_by.get(account, 0)

    def convertToAssets(self, shares: int) -> int:  # noqa: N802
        numerator, denominator = self.assets_per_share
        return shares * numerator // denominator

    def approve(self, spender: str, amount: int) -> dict[str, Any]:
        return {"method": "approve", "spender": spender, "amount": amount}

    def stake(self, amount: int) -> dict[str, Any]:
        return {"method": "stake", "amount": amount}


class FakePricing:
    """Pricing service returning fixed prices keyed by token address."""

    def __init__(self, prices: dict[str, Decimal | Exception] | None = None) -> None:
        self.prices = prices or {}
        self.requests: list[tuple[str, str]] = []

    async def get_price(self, chain: str, address: str) -> Decimal:
        self.requests.append((chain, address))
        price = self.prices.get(address, Decimal("0"))
        if isinstance(price, Exception):
            raise price
        return price


class FakeConnection:
    """
    Connection over a dict of fake contracts.

    Every call yields to the event loop once, like a real network round
    trip. Transactions are recorded as ``(contract, method, args)``.

    """

    chain = "ethereum"

    def __init__(self, signer: str | None = None, pricing: FakePricing | None = None) -> None:
        self._signer = signer
        self.pricing = pricing or FakePricing()
        self.contracts: dict[str, FakeContract] = {}
        self.transactions: list[tuple[str, str, tuple[Any, ...]]] = []
        self.bound: list[tuple[str, list[dict[str, Any]]]] = []

    @property
    def is_signer(self) -> bool:
        return self._signer is not None

    @property
    def address(self) -> str | None:
        return self._signer

    def contract(self, address: str) -> FakeContract:
        return self.contracts.setdefault(address, FakeContract(address))

    def get_contract(self, address: str, abi: list[dict[str, Any]]) -> FakeContract:
        self.bound.append((address, abi))
        return self.contract(address)

    async def call(self, method: Any, *args: Any) -> Any:
        await asyncio.sleep(0)
        return method(*args)

    async def transact(self, method: Any, *args: Any) -> Any:
        await asyncio.sleep(0)
        self.transactions.append((method.__self__.address, method.__name__, args))
        return method(*args)


REGISTRY_DATA = {
    "chain": "ethereum",
    "network": "mainnet",
    "assets": {
        "lp": {"address": LP_TOKEN, "symbol": "LP", "name": "Test LP", "decimals": 18},
        "reward": {"address": REWARD_TOKEN, "symbol": "RWD", "name": "Reward", "decimals": 18},
        "usdc": {"address": USDC, "symbol": "USDC", "name": "USD Coin", "decimals": 6},
        "vault": {
            "address": VAULT_SHARE,
            "symbol": "yvUSDC",
            "name": "USDC Vault",
            "decimals": 6,
            "underlying": "usdc",
        },
    },
    "pools": [
        {
            "address": HARVEST_POOL,
            "name": "LP Rewards",
            "asset": "lp",
            "reward_asset": "reward",
            "pool_type": "harvest",
            "active": True,
            "weeks": [1, 2],
        },
        {
            "address": AUTO_POOL,
            "asset": "vault",
            "reward_asset": "usdc",
            "pool_type": "auto-compounding",
            "active": True,
            "weeks": [2],
        },
        {
            "address": LEGACY_POOL,
            "asset": "lp",
            "reward_asset": "reward",
            "pool_type": "mystery",
            "weeks": [1],
        },
    ],
}


@pytest.fixture
def registry() -> PoolRegistry:
    return parse_registry(REGISTRY_DATA)


@pytest.fixture
def pricing() -> FakePricing:
    return FakePricing({LP_TOKEN: Decimal("10"), REWARD_TOKEN: Decimal("2"), USDC: Decimal("1")})


@pytest.fixture
def connection(pricing) -> FakeConnection:
    return FakeConnection(pricing=pricing)


@pytest.fixture
def signer_connection(pricing) -> FakeConnection:
    return FakeConnection(signer=SIGNER, pricing=pricing)
