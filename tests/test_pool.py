"""Tests for RewardsPool reads, valuation, and summaries."""

import asyncio
from decimal import Decimal

import pytest

from conftest import AUTO_POOL, HARVEST_POOL, LEGACY_POOL, LP_TOKEN, REWARD_TOKEN, USER, VAULT_SHARE, FakeConnection
from rewards_pools.pools import from_pool


@pytest.fixture
def harvest_pool(registry, connection):
    pool_contract = connection.contract(HARVEST_POOL)
    pool_contract.balances[USER] = 2 * 10**18
    pool_contract.total = 8 * 10**18
    pool_contract.earned_by[USER] = 5 * 10**18
    connection.contract(LP_TOKEN).balances[USER] = 3 * 10**18
    return from_pool(registry.get(HARVEST_POOL), connection, registry)


@pytest.fixture
def auto_pool(registry, connection):
    pool_contract = connection.contract(AUTO_POOL)
    pool_contract.balances[USER] = 4_000_000
    pool_contract.total = 16_000_000
    vault = connection.contract(VAULT_SHARE)
    vault.balances[USER] = 1_000_000
    vault.assets_per_share = (3, 2)
    return from_pool(registry.get(AUTO_POOL), connection, registry)


class TestBalances:
    """Staked and unstaked balance reads."""

    def test_staked_balance_reads_pool(self, harvest_pool):
        assert asyncio.run(harvest_pool.staked_balance(USER)) == 2 * 10**18

    def test_unstaked_balance_reads_wallet(self, harvest_pool):
        assert asyncio.run(harvest_pool.unstaked_balance(USER)) == 3 * 10**18

    def test_underlying_not_applicable_without_share_token(self, harvest_pool):
        assert harvest_pool.supports_underlying is False
        assert asyncio.run(harvest_pool.underlying_balance_of(USER)) is None

    def test_underlying_converts_staked_shares(self, auto_pool):
        assert auto_pool.supports_underlying is True
        assert asyncio.run(auto_pool.underlying_balance_of(USER)) == 6_000_000

    def test_underlying_passthrough(self, auto_pool):
        assert asyncio.run(auto_pool.underlying_balance_of(USER, passthrough=True)) == 4_000_000


class TestPercentages:
    """Ownership share formatting."""

    def test_zero_amount(self, harvest_pool):
        assert asyncio.run(harvest_pool.percentage_of_total(0)) == "0%"

    def test_empty_pool(self, harvest_pool, connection):
        connection.contract(HARVEST_POOL).total = 0

        assert asyncio.run(harvest_pool.percentage_of_total(10**18)) == "0%"

    @pytest.mark.parametrize(
        ("amount", "total", "expected"),
        [
            (1, 8, "12.5%"),
            (1, 3, "33.33%"),
            (2, 3, "66.66%"),
            (5, 5, "100.0%"),
            (1, 10**6, "0.000%"),
            (123, 10**6, "0.012%"),
        ],
    )
    def test_truncated_percentage(self, harvest_pool, connection, amount, total, expected):
        """The result is truncated to five characters, never rounded."""
        connection.contract(HARVEST_POOL).total = total

        assert asyncio.run(harvest_pool.percentage_of_total(amount)) == expected

    def test_ownership_matches_percentage_of_staked(self, harvest_pool):
        async def run():
            staked = await harvest_pool.staked_balance(USER)
            return await harvest_pool.percentage_ownership(USER), await harvest_pool.percentage_of_total(staked)

        ownership, expected = asyncio.run(run())
        assert ownership == expected == "25.0%"


class TestValuation:
    """USD value of staked balance plus rewards."""

    def test_harvest_pool_value(self, harvest_pool):
        # 2 LP at $10 plus 5 RWD at $2
        assert asyncio.run(harvest_pool.usd_value_of(USER)) == Decimal("30")

    def test_auto_pool_values_underlying(self, auto_pool, pricing):
        # 4 shares redeem for 6 USDC at $1, no claimable rewards
        assert asyncio.run(auto_pool.usd_value_of(USER)) == Decimal("6")

    def test_pricing_failure_propagates(self, harvest_pool, pricing):
        pricing.prices[REWARD_TOKEN] = RuntimeError("price feed down")

        with pytest.raises(RuntimeError, match="price feed down"):
            asyncio.run(harvest_pool.usd_value_of(USER))


class TestSummary:
    """Aggregated pool summaries."""

    def test_harvest_summary(self, harvest_pool, registry):
        summary = asyncio.run(harvest_pool.summary(USER))

        assert summary.address == HARVEST_POOL
        assert summary.user == USER
        assert summary.pool == registry.get(HARVEST_POOL)
        assert summary.is_active is True
        assert summary.staked_balance == 2 * 10**18
        assert summary.unstaked_balance == 3 * 10**18
        assert summary.earned_rewards == 5 * 10**18
        assert summary.percentage_ownership == "25.0%"
        assert summary.usd_value_of == Decimal("30")

    def test_summary_omits_underlying_without_share_token(self, harvest_pool):
        summary = asyncio.run(harvest_pool.summary(USER))

        assert "underlying_balance_of" not in summary.model_fields_set
        assert "underlying_balance_of" not in summary.to_dict()

    def test_summary_includes_underlying_for_share_token(self, auto_pool):
        summary = asyncio.run(auto_pool.summary(USER))

        assert summary.underlying_balance_of == 6_000_000
        assert summary.to_dict()["underlying_balance_of"] == 6_000_000
        assert summary.earned_rewards == 0
        assert summary.unstaked_balance == 1_000_000

    def test_summary_of_inactive_pool(self, registry, connection):
        pool = from_pool(registry.get(LEGACY_POOL), connection, registry)

        summary = asyncio.run(pool.summary(USER))

        assert summary.is_active is False
        assert summary.staked_balance == 0
        assert summary.percentage_ownership == "0%"
        assert summary.usd_value_of == Decimal("0")

    def test_summary_failure_propagates(self, harvest_pool, pricing):
        pricing.prices[LP_TOKEN] = RuntimeError("price feed down")

        with pytest.raises(RuntimeError):
            asyncio.run(harvest_pool.summary(USER))

    def test_summary_reads_run_concurrently(self, registry, pricing):
        """Reads are issued together rather than one after another."""

        class TrackingConnection(FakeConnection):
            in_flight = 0
            max_in_flight = 0

            async def call(self, method, *args):
                self.in_flight += 1
                self.max_in_flight = max(self.max_in_flight, self.in_flight)
                try:
                    await asyncio.sleep(0)
                    return method(*args)
                finally:
                    self.in_flight -= 1

        connection = TrackingConnection(pricing=pricing)
        pool = from_pool(registry.get(HARVEST_POOL), connection, registry)

        asyncio.run(pool.summary(USER))

        assert connection.max_in_flight >= 4


def test_is_active_uses_registry(registry, connection):
    assert from_pool(registry.get(HARVEST_POOL), connection, registry).is_active() is True
    assert from_pool(registry.get(LEGACY_POOL), connection, registry).is_active() is False
