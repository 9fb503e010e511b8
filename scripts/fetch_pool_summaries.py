"""Diagnostic script: Print every pool summary for a wallet, one pool at a time."""

import asyncio
import sys
import traceback

from rewards_pools.core.units import format_units
from rewards_pools.data import load_registry
from rewards_pools.pools import RewardsPool, known_pools
from rewards_pools.rpc.provider import ApeConnection

TARGET_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"  # vitalik.eth


async def print_pool_summary(pool: RewardsPool, user_address: str) -> None:
    """Fetch and print one pool's summary, reporting failures instead of stopping."""
    print(f"\n{'='*60}")
    print(f"  Pool: {pool.name} ({pool.pool_type.value})")
    print(f"  Address: {pool.address}")
    print(f"{'='*60}")

    try:
        summary = await pool.summary(user_address)
    except Exception as e:
        print(f"\n  ERROR: {e}")
        traceback.print_exc()
        return

    decimals = pool.lptoken.decimals
    print(f"    Active:          {summary.is_active}")
    print(f"    Staked:          {format_units(summary.staked_balance, decimals)} {pool.lptoken.symbol}")
    print(f"    Wallet:          {format_units(summary.unstaked_balance, decimals)} {pool.lptoken.symbol}")
    print(f"    Earned:          {format_units(summary.earned_rewards, pool.reward.decimals)} {pool.reward.symbol}")
    print(f"    Pool Share:      {summary.percentage_ownership}")
    print(f"    USD Value:       ${summary.usd_value_of:,.2f}")
    if summary.underlying_balance_of is not None:
        underlying = pool.lptoken.underlying
        print(f"    Underlying:      {format_units(summary.underlying_balance_of, underlying.decimals)} {underlying.symbol}")


async def run(user_address: str, connection: ApeConnection) -> None:
    """Summarize every known pool sequentially."""
    try:
        for pool in known_pools(connection):
            await print_pool_summary(pool, user_address)
    finally:
        await connection.pricing.aclose()


def main() -> None:
    """Fetch pool summaries for the address given on the command line."""
    address = sys.argv[1] if len(sys.argv) > 1 else TARGET_ADDRESS
    registry = load_registry()
    print(f"Fetching pool summaries for: {address}")
    print(f"Pools in registry: {len(registry)}")

    connection = ApeConnection(chain=registry.chain, network=registry.network)
    try:
        connection.connect()
        print(f"  Connected to {registry.chain}:{registry.network}")
        asyncio.run(run(address, connection))
    finally:
        connection.disconnect()

    print(f"\n{'='*60}")
    print("  Scan complete.")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
