"""Connection wrapper using Ape's network and account management."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any

from ape import Contract, accounts, networks

from rewards_pools.pricing import DeFiLlamaPricing

logger = logging.getLogger(__name__)


class ApeConnection:
    """
    Network connection using Ape's network management system.

    Reads are offloaded to worker threads so several can be in flight at
    once. Transactions go through a single-worker executor, so they are
    submitted in the order they were scheduled and nonces follow that order.

    Parameters
    ----------
    chain : str
        Chain name (e.g., 'ethereum', 'base')
    network : str
        Network name (default: 'mainnet')
    account_alias : str | None
        Ape account alias used to sign transactions. Read-only if None.
    pricing : Any | None
        Pricing service. Defaults to DeFiLlama.

    """

    def __init__(
        self,
        chain: str,
        network: str = "mainnet",
        account_alias: str | None = None,
        pricing: Any | None = None,
    ) -> None:
        self.chain = chain
        self.network = network
        self.account_alias = account_alias
        self.pricing = pricing or DeFiLlamaPricing()
        self._network_context = None
        self._provider = None
        self._account = None
        self._tx_executor: ThreadPoolExecutor | None = None

    def connect(self) -> None:
        """Connect to the network and load the signing account, if any."""
        try:
            if self.account_alias:
                self._account = accounts.load(self.account_alias)

            network_choice = f"{self.chain}:{self.network}"
            self._network_context = networks.parse_network_choice(network_choice)
            self._network_context.__enter__()
            self._provider = networks.provider

        except Exception as e:
            self.disconnect()
            error_msg = f"Failed to connect to {self.chain}:{self.network}: {e}"
            raise RuntimeError(error_msg) from e

        self._tx_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rewards-pools-tx")
        logger.debug("Connected to %s:%s (signer: %s)", self.chain, self.network, self.address)

    def disconnect(self) -> None:
        """Disconnect from the network."""
        if self._tx_executor:
            self._tx_executor.shutdown(wait=True)
            self._tx_executor = None
        if self._network_context:
            try:
                self._network_context.__exit__(None, None, None)
            except Exception as e:
                logger.debug("Error during network context cleanup: %s", e)
            self._network_context = None
        self._provider = None
        self._account = None

    @property
    def is_signer(self) -> bool:
        """True when an account is loaded and transactions can be sent."""
        return self._account is not None

    @property
    def address(self) -> str | None:
        """Address of the signing account, None when read-only."""
        return self._account.address if self._account is not None else None

    def get_contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        """
        Get a contract instance.

        Parameters
        ----------
        address : str
            Contract address
        abi : list[dict[str, Any]]
            Contract ABI

        Returns
        -------
        Contract
            Ape contract instance

        """
        if not self._provider:
            error_msg = "Provider not connected. Call connect() first."
            raise RuntimeError(error_msg)

        return Contract(address, abi=abi)

    async def call(self, method: Any, *args: Any) -> Any:
        """
        Run a blocking read in a worker thread.

        Parameters
        ----------
        method : Any
            Bound Ape contract method
        *args : Any
            Method parameters

        Returns
        -------
        Any
            Call result

        """
        return await asyncio.to_thread(method, *args)

    async def transact(self, method: Any, *args: Any) -> Any:
        """
        Sign and send a transaction from the loaded account.

        Parameters
        ----------
        method : Any
            Bound Ape contract method
        *args : Any
            Method parameters

        Returns
        -------
        Any
            Ape receipt

        Raises
        ------
        RuntimeError
            If no account is loaded or the connection is closed

        """
        if self._account is None or self._tx_executor is None:
            error_msg = "Transactions need a connected signer account."
            raise RuntimeError(error_msg)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._tx_executor, partial(method, *args, sender=self._account))

    def __enter__(self) -> "ApeConnection":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.disconnect()
