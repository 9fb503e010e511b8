"""Rewards pool: one query and mutation surface over every pool variant."""

import asyncio
import logging
from decimal import Decimal
from typing import Any

from rewards_pools.core.errors import NoSignerError
from rewards_pools.core.models import PoolDescriptor, PoolType, Summary
from rewards_pools.core.units import MAX_UINT256, WEI_PER_ETHER, format_units
from rewards_pools.data.loader import PoolRegistry, load_registry
from rewards_pools.pools.variants import PoolVariant, get_variant
from rewards_pools.rpc.contract import BoundContract, Connection
from rewards_pools.tokens import Token

logger = logging.getLogger(__name__)


class RewardsPool:
    """
    Staking pool that pays out a reward token.

    The pool contract is held as ``self.contract``; how rewards accrue is
    decided by ``self.variant`` (see :mod:`rewards_pools.pools.variants`).

    Parameters
    ----------
    descriptor : PoolDescriptor
        Registry record for the pool
    connection : Connection
        Connection used for every contract call and transaction
    variant : PoolVariant | None
        Accrual behaviour. Resolved from ``descriptor.pool_type`` if None.
    registry : PoolRegistry | None
        Registry consulted by :meth:`is_active`. Bundled registry if None.

    Attributes
    ----------
    name : str
        Display name, falling back to the staked asset's name
    lptoken : Token
        Adapter for the staked asset
    reward : Token
        Adapter for the reward asset

    """

    def __init__(
        self,
        descriptor: PoolDescriptor,
        connection: Connection,
        variant: PoolVariant | None = None,
        registry: PoolRegistry | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.connection = connection
        self.variant = variant or get_variant(descriptor.pool_type)
        self.registry = registry
        self.contract = BoundContract(connection, descriptor.address, self.variant.abi)

        self.name = descriptor.name or descriptor.asset.name
        self.lptoken = Token.from_asset(descriptor.asset, connection)
        self.reward = Token.from_asset(descriptor.reward_asset, connection)

    @property
    def address(self) -> str:
        return self.descriptor.address

    @property
    def pool_type(self) -> PoolType:
        return self.variant.pool_type

    @property
    def supports_underlying(self) -> bool:
        """True when staked shares can be converted to underlying units."""
        return self.lptoken.supports_underlying

    async def staked_balance(self, address: str) -> int:
        """Raw amount ``address`` has staked in the pool."""
        return await self.contract.call("balanceOf", address)

    async def unstaked_balance(self, address: str) -> int:
        """Raw wallet balance of the staked asset held by ``address``."""
        return await self.lptoken.balance_of(address)

    async def total_supply(self) -> int:
        """Raw total amount staked in the pool."""
        return await self.contract.call("totalSupply")

    async def earned_rewards(self, address: str | None = None) -> int:
        """Raw claimable rewards for ``address``."""
        return await self.variant.earned_rewards(self, address)

    async def underlying_balance_of(self, address: str, passthrough: bool = False) -> int | None:
        """
        Staked balance converted into the staked asset's underlying units.

        Parameters
        ----------
        address : str
            User address
        passthrough : bool
            Forwarded to the share conversion (skip conversion when True)

        Returns
        -------
        int | None
            Underlying amount, or None when the staked asset is not a share
            token. None means "not applicable", not zero.

        """
        if not self.supports_underlying:
            return None
        balance = await self.staked_balance(address)
        return await self.lptoken.calc_share(balance, passthrough)

    async def usd_value_of(self, address: str) -> Decimal:
        """
        USD value of the staked balance plus earned rewards.

        Parameters
        ----------
        address : str
            User address

        Returns
        -------
        Decimal
            Combined USD value

        """
        staked, earned = await asyncio.gather(
            self.staked_balance(address),
            self.earned_rewards(address),
        )
        staked_value, reward_value = await asyncio.gather(
            self.lptoken.usd_value_of(staked),
            self.reward.usd_value_of(earned),
        )
        return staked_value + reward_value

    async def percentage_of_total(self, amount: int) -> str:
        """
        Share of the pool's total supply that ``amount`` represents.

        The result is truncated for display (``"12.34%"`` style, at most five
        characters before the ``%``) and must not be used for accounting.

        Parameters
        ----------
        amount : int
            Raw staked amount

        Returns
        -------
        str
            Percentage string, ``"0%"`` for a zero amount or an empty pool

        """
        if not amount:
            return "0%"
        total = await self.total_supply()
        if not total:
            return "0%"

        ratio = amount * WEI_PER_ETHER // total
        return format_units(ratio, 16)[:5] + "%"

    async def percentage_ownership(self, address: str) -> str:
        """Share of the pool staked by ``address``."""
        return await self.percentage_of_total(await self.staked_balance(address))

    def is_active(self) -> bool:
        """Whether the registry lists this pool as active."""
        registry = self.registry if self.registry is not None else load_registry()
        return registry.is_address_active(self.address)

    async def summary(self, address: str) -> Summary:
        """
        Collect balances, rewards, ownership, and value for one user.

        The six reads run concurrently and are not pinned to one block.

        Parameters
        ----------
        address : str
            User address

        Returns
        -------
        Summary
            Aggregated pool state for ``address``

        """
        (
            staked,
            unstaked,
            earned,
            underlying,
            ownership,
            usd_value,
        ) = await asyncio.gather(
            self.staked_balance(address),
            self.unstaked_balance(address),
            self.earned_rewards(address),
            self.underlying_balance_of(address),
            self.percentage_ownership(address),
            self.usd_value_of(address),
        )

        fields: dict[str, Any] = {
            "address": self.address,
            "user": address,
            "pool": self.descriptor,
            "is_active": self.is_active(),
            "staked_balance": staked,
            "unstaked_balance": unstaked,
            "earned_rewards": earned,
            "percentage_ownership": ownership,
            "usd_value_of": usd_value,
        }
        if underlying is not None:
            fields["underlying_balance_of"] = underlying

        logger.debug("Summary for %s in %s: staked=%s earned=%s", address, self.name, staked, earned)
        return Summary(**fields)

    async def approve_and_stake(self, amount: int | None = None, approve_forever: bool = False) -> Any | None:
        """
        Approve the pool to pull the staked asset, then stake.

        The stake transaction is scheduled right after the approval without
        waiting for the approval to complete; the connection sends them in
        that order. A failed approval is raised only once the stake has
        settled, and the stake's outcome is logged.

        Parameters
        ----------
        amount : int | None
            Raw amount to stake. None or 0 stakes the whole wallet balance.
        approve_forever : bool
            Approve the maximum uint256 instead of ``amount``

        Returns
        -------
        Any | None
            Stake transaction receipt, or None when the wallet balance is
            below ``amount`` (nothing is sent)

        Raises
        ------
        NoSignerError
            If the connection cannot sign transactions

        """
        if not self.connection.is_signer:
            msg = "No signer"
            raise NoSignerError(msg)

        me = self.connection.address

        allowance, balance = await asyncio.gather(
            self.lptoken.allowances(me, self.address),
            self.lptoken.balance_of(me),
        )

        if not amount:
            amount = balance
        if balance < amount:
            logger.info(
                "Not staking in %s: balance %s is below requested amount %s",
                self.name,
                balance,
                amount,
            )
            return None

        approve_tx = None
        if approve_forever or allowance < balance:
            approve_tx = asyncio.ensure_future(
                self.lptoken.approve(self.address, MAX_UINT256 if approve_forever else amount),
            )
        stake_tx = asyncio.ensure_future(self.contract.transact("stake", amount))
        logger.info("Staking %s %s in %s", amount, self.lptoken.symbol, self.name)

        if approve_tx is None:
            return await stake_tx

        # the stake is already queued, so its outcome is collected even when the approval fails
        approval, receipt = await asyncio.gather(approve_tx, stake_tx, return_exceptions=True)
        if isinstance(approval, BaseException):
            if isinstance(receipt, BaseException):
                logger.error("Stake in %s failed after approval failure: %s", self.name, receipt)
            else:
                logger.warning("Stake in %s was sent although the approval failed", self.name)
            raise approval
        if isinstance(receipt, BaseException):
            raise receipt
        return receipt

    def __repr__(self) -> str:
        return f"RewardsPool({self.name!r}, {self.address}, {self.pool_type.value})"
