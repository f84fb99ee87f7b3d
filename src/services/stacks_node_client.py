"""
Read-only contract calls against a Stacks node.
"""
from typing import Any, Dict, List, Optional

import httpx

from src.clarity import ClarityDecodeError, decode_to_json, uint_argument
from src.config.settings import HTTP_TIMEOUT_SECONDS, READ_ONLY_SENDER_ADDRESS, get_stacks_node_url
from src.exceptions import UpstreamAPIError, ValidationError
from src.utils.logger import logger


class StacksNodeError(UpstreamAPIError):
    """A read-only call failed or returned something unusable."""


def split_contract_principal(contract_principal: str) -> List[str]:
    """
    Split ``address.contractName`` into its two parts.

    Raises:
        ValidationError: If either part is missing
    """
    parts = (contract_principal or "").split(".")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValidationError("Invalid contract address format. Expected format: address.contractName")
    return parts[:2]


class StacksNodeClient:
    """Async client for ``/v2/contracts/call-read`` on a Stacks node."""

    def __init__(
        self,
        base_url: str = None,
        network: str = None,
        sender: str = READ_ONLY_SENDER_ADDRESS,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: httpx.AsyncClient = None,
    ):
        self.base_url = (base_url or get_stacks_node_url(network)).rstrip("/")
        self.sender = sender
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        arguments: Optional[List[str]] = None,
    ) -> str:
        """
        Execute a read-only function and return the hex-encoded result.

        Args:
            arguments: Serialized Clarity values, ``0x``-prefixed hex

        Raises:
            StacksNodeError: On a non-OK response or a result without ``okay``
        """
        url = f"{self.base_url}/v2/contracts/call-read/{contract_address}/{contract_name}/{function_name}"
        body = {"sender": self.sender, "arguments": arguments or []}

        logger.info(f"[StacksNode] call-read {contract_address}.{contract_name}::{function_name}")
        try:
            response = await self.client.post(url, json=body, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            logger.error(f"[StacksNode] call-read failed: {e}")
            raise StacksNodeError(str(e)) from e

        if not response.is_success:
            raise StacksNodeError(
                f"Stacks API returned an error: {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise StacksNodeError("Invalid response format from Stacks API") from e

        if not (isinstance(result, dict) and result.get("okay") and result.get("result")):
            raise StacksNodeError("Invalid response format from Stacks API", response=result)
        return result["result"]

    async def get_proposal(self, contract_principal: str, proposal_id: int) -> Dict[str, Any]:
        """``get-proposal`` on a voting contract, decoded to cv JSON."""
        address, contract_name = split_contract_principal(contract_principal)
        hex_result = await self.call_read_only(
            address, contract_name, "get-proposal", [uint_argument(proposal_id)]
        )
        try:
            return decode_to_json(hex_result)
        except ClarityDecodeError as e:
            logger.error(f"[StacksNode] Could not decode get-proposal result: {e}")
            raise StacksNodeError(f"Invalid response format from Stacks API: {e}") from e

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
