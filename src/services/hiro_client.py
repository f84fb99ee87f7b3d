"""
HTTP client for the Hiro Stacks indexer API.

Provides the burn-block, address-balance and token-holder lookups the
dashboard needs. The base URL follows the configured Stacks network and
every request carries the ``X-API-Key`` header.
"""
from typing import Any, Dict, Optional

import httpx

from src.config.settings import HIRO_API_KEY, HTTP_TIMEOUT_SECONDS, get_hiro_api_url
from src.data_models.schemas import WalletBalance
from src.exceptions import UpstreamAPIError
from src.utils.logger import logger


class HiroAPIError(UpstreamAPIError):
    """Custom exception for Hiro API errors. ``status_code`` is None when no response arrived."""

    def __init__(self, message: str, status_code: Optional[int], response: Optional[Dict[str, Any]] = None):
        label = f"Hiro API Error {status_code}" if status_code else "Hiro API unreachable"
        super().__init__(f"{label}: {message}", status_code, response)


class HiroAPIClient:
    """
    Async HTTP client for the Hiro API.

    Provides methods to:
    - Look up a burn block (for its wall-clock time)
    - Read STX, fungible and non-fungible balances of an address
    - List the holders of a fungible token
    """

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        network: str = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: httpx.AsyncClient = None,
    ):
        """
        Initialize the Hiro API client.

        Args:
            base_url: Base URL for the API (default derived from the network)
            api_key: Hiro API key (default from HIRO_API_KEY env var)
            network: "mainnet" or "testnet" (default from STACKS_NETWORK)
            timeout: Request timeout in seconds
            client: Pre-built httpx client, mainly for tests
        """
        self.base_url = (base_url or get_hiro_api_url(network)).rstrip("/")
        self.api_key = HIRO_API_KEY if api_key is None else api_key
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "X-API-Key": self.api_key or "",
        }

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Parse a response and raise HiroAPIError for error statuses.

        Raises:
            HiroAPIError: If the API returns a status >= 400
        """
        try:
            data = response.json()
        except ValueError:
            data = {"error": "Failed to parse response", "raw": response.text}

        if response.status_code >= 400:
            error_msg = "Unknown error"
            if isinstance(data, dict):
                error_msg = data.get("message") or data.get("error") or error_msg
            raise HiroAPIError(error_msg, response.status_code, data)

        return data

    async def _get(self, path: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(url, headers=self._get_headers(), params=params)
        except httpx.HTTPError as e:
            logger.error(f"[HiroAPI] GET {path} failed: {e}")
            raise HiroAPIError(str(e), None) from e
        return self._handle_response(response)

    async def get_burn_block(self, height: int) -> Dict[str, Any]:
        """
        Get a burn block by height.

        Raises:
            HiroAPIError: 404 when the block has not been mined yet
        """
        return await self._get(f"/extended/v2/burn-blocks/{height}")

    async def get_burn_block_time(self, height: int) -> Optional[str]:
        """ISO time of a burn block, or None when the API does not return it."""
        try:
            data = await self.get_burn_block(height)
        except HiroAPIError as e:
            if e.status_code is None:
                raise
            logger.info(f"[HiroAPI] Burn block {height} unavailable ({e.status_code})")
            return None
        return data.get("burn_block_time_iso")

    async def get_address_balances(self, address: str) -> WalletBalance:
        logger.info(f"[HiroAPI] Fetching balances for {address}")
        data = await self._get(f"/extended/v1/address/{address}/balances")
        return WalletBalance.model_validate(data)

    async def get_token_holders(
        self,
        contract_principal: str,
        token_symbol: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        List holders of a fungible token.

        Returns the raw payload: ``total_supply``, ``total`` and ``results``
        (each with ``address`` and ``balance``).
        """
        params = {}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        logger.info(f"[HiroAPI] Fetching holders for {contract_principal}::{token_symbol}")
        return await self._get(
            f"/extended/v1/tokens/ft/{contract_principal}::{token_symbol}/holders",
            params=params or None,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
