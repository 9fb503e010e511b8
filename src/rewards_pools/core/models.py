"""Data models for assets, pool descriptors, and pool summaries."""

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PoolType(StrEnum):
    """How a pool accrues rewards."""

    HARVEST = "harvest"
    AUTO_COMPOUNDING = "auto-compounding"


class Asset(BaseModel):
    """
    Static description of a token.

    Attributes
    ----------
    address : str
        Token contract address
    symbol : str
        Token symbol (e.g., 'UNI-V2', 'WETH')
    name : str
        Full token name
    decimals : int
        Number of decimal places
    price_address : str | None
        Address to price the token by, when it differs from ``address``
    underlying : Asset | None
        Underlying asset for share tokens (vault shares convertible to
        underlying units). ``None`` for plain ERC-20 tokens.

    """

    model_config = ConfigDict(frozen=True)

    address: str
    symbol: str
    name: str
    decimals: int = 18
    price_address: str | None = None
    underlying: "Asset | None" = None


class PoolDescriptor(BaseModel):
    """
    Registry record identifying a rewards pool.

    Attributes
    ----------
    address : str
        Pool contract address
    name : str | None
        Display name (falls back to the staked asset's name)
    asset : Asset
        Asset staked into the pool
    reward_asset : Asset
        Asset paid out as rewards
    pool_type : str | None
        Variant tag. Kept as a plain string so unrecognised tags still load.
    active : bool
        Whether the pool is currently incentivised
    weeks : list[int]
        Incentive weeks the pool took part in

    """

    model_config = ConfigDict(frozen=True)

    address: str
    name: str | None = None
    asset: Asset
    reward_asset: Asset
    pool_type: str | None = None
    active: bool = False
    weeks: tuple[int, ...] = ()


class Summary(BaseModel):
    """
    Point-in-time view of one user's position in a pool.

    The six on-chain values are fetched concurrently and are not pinned to a
    single block, so they may reflect slightly different chain states.

    Attributes
    ----------
    address : str
        Pool contract address
    user : str
        Address the summary was computed for
    pool : PoolDescriptor
        Registry descriptor of the pool
    is_active : bool
        Registry active flag
    staked_balance : int
        Raw staked amount
    unstaked_balance : int
        Raw wallet balance of the staked asset
    earned_rewards : int
        Raw claimable rewards (always 0 for auto-compounding pools)
    percentage_ownership : str
        Display share of the pool's total supply (e.g. ``"12.5%"``)
    usd_value_of : Decimal
        USD value of staked balance plus earned rewards
    underlying_balance_of : int | None
        Staked balance in underlying units; left unset when the staked asset
        has no share conversion

    """

    address: str
    user: str
    pool: PoolDescriptor
    is_active: bool
    staked_balance: int
    unstaked_balance: int
    earned_rewards: int
    percentage_ownership: str
    usd_value_of: Decimal
    underlying_balance_of: int | None = Field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialise to a JSON-compatible dict.

        ``underlying_balance_of`` only appears when it was computed.

        """
        data = self.model_dump(mode="json", exclude={"underlying_balance_of"})
        if "underlying_balance_of" in self.model_fields_set:
            data["underlying_balance_of"] = self.underlying_balance_of
        return data
