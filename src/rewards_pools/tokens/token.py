"""Token adapters: balances, allowances, approvals, and USD valuation."""

import asyncio
import logging
from decimal import Decimal
from typing import Any

from rewards_pools.core.models import Asset
from rewards_pools.core.units import to_decimal_units
from rewards_pools.data.abis import ERC20_ABI, SHARE_TOKEN_ABI
from rewards_pools.rpc.contract import BoundContract, Connection

logger = logging.getLogger(__name__)


class Token:
    """
    ERC-20 token adapter.

    Parameters
    ----------
    asset : Asset
        Static token description
    connection : Connection
        Connection used for contract calls and pricing

    """

    supports_underlying = False
    abi: list[dict[str, Any]] = ERC20_ABI

    def __init__(self, asset: Asset, connection: Connection) -> None:
        self.asset = asset
        self.connection = connection
        self.contract = BoundContract(connection, asset.address, self.abi)

    @classmethod
    def from_asset(cls, asset: Asset, connection: Connection) -> "Token":
        """
        Build the right adapter for an asset.

        Assets with an ``underlying`` get a :class:`ShareToken`.

        """
        if asset.underlying is not None:
            return ShareToken(asset, connection)
        return Token(asset, connection)

    @property
    def address(self) -> str:
        return self.asset.address

    @property
    def name(self) -> str:
        return self.asset.name

    @property
    def symbol(self) -> str:
        return self.asset.symbol

    @property
    def decimals(self) -> int:
        return self.asset.decimals

    async def balance_of(self, address: str) -> int:
        """Raw wallet balance of ``address``."""
        return await self.contract.call("balanceOf", address)

    async def allowances(self, owner: str, spender: str) -> int:
        """Raw amount ``spender`` may transfer out of ``owner``'s balance."""
        return await self.contract.call("allowance", owner, spender)

    async def approve(self, spender: str, amount: int) -> Any:
        """
        Approve ``spender`` to transfer ``amount`` of this token.

        Returns
        -------
        Any
            Transaction receipt

        """
        logger.info("Approving %s %s for %s", amount, self.symbol, spender)
        return await self.contract.transact("approve", spender, amount)

    async def price(self) -> Decimal:
        """USD price of one whole token."""
        price_address = self.asset.price_address or self.asset.address
        return await self.connection.pricing.get_price(self.connection.chain, price_address)

    async def usd_value_of(self, amount: int) -> Decimal:
        """
        USD value of a raw amount of this token.

        Parameters
        ----------
        amount : int
            Raw amount in base units

        Returns
        -------
        Decimal
            USD value

        """
        if not amount:
            return Decimal("0")
        price = await self.price()
        return to_decimal_units(amount, self.decimals) * price

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.symbol}, {self.address})"


class ShareToken(Token):
    """
    Vault share token convertible into its underlying asset.

    USD value is computed from the underlying amount the shares redeem for.

    """

    supports_underlying = True
    abi = SHARE_TOKEN_ABI

    def __init__(self, asset: Asset, connection: Connection) -> None:
        if asset.underlying is None:
            msg = f"Share token {asset.symbol} needs an underlying asset"
            raise ValueError(msg)
        super().__init__(asset, connection)
        self.underlying = Token.from_asset(asset.underlying, connection)

    async def calc_share(self, amount: int, passthrough: bool = False) -> int:
        """
        Convert a raw share amount into underlying units.

        Parameters
        ----------
        amount : int
            Raw share amount
        passthrough : bool
            Return ``amount`` unconverted, skipping the contract call

        Returns
        -------
        int
            Raw underlying amount

        """
        if passthrough or not amount:
            return amount
        return await self.contract.call("convertToAssets", amount)

    async def underlying_balance_of(self, address: str) -> int:
        """Wallet share balance of ``address`` expressed in underlying units."""
        return await self.calc_share(await self.balance_of(address))

    async def usd_value_of(self, amount: int) -> Decimal:
        if not amount:
            return Decimal("0")
        if self.asset.price_address:
            return await super().usd_value_of(amount)
        underlying_amount, price = await asyncio.gather(
            self.calc_share(amount),
            self.underlying.price(),
        )
        return to_decimal_units(underlying_amount, self.underlying.decimals) * price
