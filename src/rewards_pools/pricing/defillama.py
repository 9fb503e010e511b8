"""DeFiLlama pricing service for fetching token USD prices."""

import logging
from decimal import Decimal

import httpx

from rewards_pools.pricing.cache import PriceCache

logger = logging.getLogger(__name__)


class DeFiLlamaPricing:
    """
    Fetches token prices from the DeFiLlama coins API.

    HTTP failures propagate to the caller. A token DeFiLlama has no price
    for is priced at zero.

    Parameters
    ----------
    base_url : str
        DeFiLlama API base URL
    cache_ttl : float
        Seconds a fetched price stays cached
    transport : httpx.AsyncBaseTransport | None
        Custom transport (tests use ``httpx.MockTransport``)

    """

    def __init__(
        self,
        base_url: str = "https://coins.llama.fi",
        cache_ttl: float = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.cache = PriceCache(default_ttl=cache_ttl)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """HTTP client, created on first use inside the running event loop."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=30.0, transport=self._transport)
        return self._client

    async def get_prices(
        self,
        tokens: list[tuple[str, str]],
    ) -> dict[tuple[str, str], Decimal]:
        """
        Fetch USD prices for multiple tokens.

        Parameters
        ----------
        tokens : list[tuple[str, str]]
            List of (chain, address) tuples

        Returns
        -------
        dict[tuple[str, str], Decimal]
            Mapping of (chain, address) to USD price

        Examples
        --------
        >>> pricing = DeFiLlamaPricing()
        >>> tokens = [
        ...     ("ethereum", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),  # USDC
        ...     ("ethereum", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),  # WETH
        ... ]
        >>> prices = await pricing.get_prices(tokens)

        """
        if not tokens:
            return {}

        result = {}
        missing = []
        for chain, address in tokens:
            cached = self.cache.get(chain, address)
            if cached is None:
                missing.append((chain, address))
            else:
                result[chain, address] = cached

        if not missing:
            return result

        coin_ids = [self._format_coin_id(chain, addr) for chain, addr in missing]
        prices_data = await self._fetch_batch_prices(coin_ids)

        for (chain, address), coin_id in zip(missing, coin_ids, strict=True):
            price_info = prices_data.get(coin_id)
            if price_info and "price" in price_info:
                price = Decimal(str(price_info["price"]))
            else:
                logger.warning("No DeFiLlama price for %s, using 0", coin_id)
                price = Decimal("0")
            self.cache.set(chain, address, price)
            result[chain, address] = price

        return result

    async def get_price(self, chain: str, address: str) -> Decimal:
        """
        Fetch USD price for a single token.

        Parameters
        ----------
        chain : str
            Chain name
        address : str
            Token contract address

        Returns
        -------
        Decimal
            USD price

        """
        prices = await self.get_prices([(chain, address)])
        return prices.get((chain, address), Decimal("0"))

    async def _fetch_batch_prices(self, coin_ids: list[str]) -> dict:
        """
        Fetch prices from DeFiLlama API.

        Parameters
        ----------
        coin_ids : list[str]
            Coin identifiers in "chain:address" format

        Returns
        -------
        dict
            ``coins`` section of the API response

        Raises
        ------
        httpx.HTTPError
            If the request fails or returns an error status

        """
        coins_param = ",".join(coin_ids)
        url = f"{self.base_url}/prices/current/{coins_param}"
        logger.debug("GET %s", url)

        response = await self.client.get(url)
        response.raise_for_status()

        return response.json().get("coins", {})

    def _format_coin_id(self, chain: str, address: str) -> str:
        """
        Format coin identifier for DeFiLlama API.

        Parameters
        ----------
        chain : str
            Chain name
        address : str
            Token address

        Returns
        -------
        str
            Formatted coin ID (e.g., "ethereum:0x...")

        """
        chain_map = {
            "ethereum": "ethereum",
            "base": "base",
            "polygon": "polygon",
            "arbitrum": "arbitrum",
        }

        llama_chain = chain_map.get(chain.lower(), chain.lower())
        return f"{llama_chain}:{address}"

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "DeFiLlamaPricing":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.aclose()
