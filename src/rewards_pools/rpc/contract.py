"""Async-facing contract handle bound to one address and ABI."""

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """
    Interface a connection must provide to pools and token adapters.

    Attributes
    ----------
    chain : str
        Chain name (e.g., 'ethereum')
    is_signer : bool
        True when transactions can be sent
    address : str | None
        Address of the signer, None for read-only connections
    pricing : Any
        Pricing service with an async ``get_price(chain, address)``

    """

    chain: str
    pricing: Any

    @property
    def is_signer(self) -> bool: ...

    @property
    def address(self) -> str | None: ...

    def get_contract(self, address: str, abi: list[dict[str, Any]]) -> Any: ...

    async def call(self, method: Any, *args: Any) -> Any: ...

    async def transact(self, method: Any, *args: Any) -> Any: ...


class BoundContract:
    """
    Contract instance reached through a connection.

    Reads and transactions are both coroutines; the connection decides how
    the underlying blocking calls are scheduled.

    Parameters
    ----------
    connection : Connection
        Connection that owns the network access
    address : str
        Contract address
    abi : list[dict[str, Any]]
        Contract ABI

    """

    def __init__(self, connection: Connection, address: str, abi: list[dict[str, Any]]) -> None:
        self.connection = connection
        self.address = address
        self.abi = abi
        self._contract = connection.get_contract(address, abi)

    async def call(self, method: str, *args: Any) -> Any:
        """
        Run a read-only contract method.

        Parameters
        ----------
        method : str
            Method name (e.g., 'balanceOf', 'totalSupply')
        *args : Any
            Method parameters

        Returns
        -------
        Any
            Call result

        """
        logger.debug("call %s.%s%s", self.address, method, args)
        return await self.connection.call(getattr(self._contract, method), *args)

    async def transact(self, method: str, *args: Any) -> Any:
        """
        Send a state-changing contract method as a transaction.

        Parameters
        ----------
        method : str
            Method name (e.g., 'approve', 'stake')
        *args : Any
            Method parameters

        Returns
        -------
        Any
            Transaction receipt

        """
        logger.debug("transact %s.%s%s", self.address, method, args)
        return await self.connection.transact(getattr(self._contract, method), *args)

    def __repr__(self) -> str:
        return f"BoundContract({self.address})"
