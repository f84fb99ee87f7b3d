"""
Client for the read-only contract-call cache service.

The cache fronts Stacks node read-only calls and returns decoded values,
so aggregate vote counts can be read without decoding Clarity locally.
"""
from typing import Optional, Union

import httpx

from src.config.settings import HTTP_TIMEOUT_SECONDS, get_cache_url
from src.core.votes import format_votes, parse_vote_count
from src.data_models.governance_schemas import ProposalVotes
from src.exceptions import ConfigurationError, UpstreamAPIError, ValidationError
from src.services.stacks_node_client import split_contract_principal
from src.utils.logger import logger

BUST_CACHE_TTL_SECONDS = 3600


class ContractCacheError(UpstreamAPIError):
    """The cache service returned an error."""


class ContractCacheClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        network: str = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: httpx.AsyncClient = None,
    ):
        self.base_url = (base_url or get_cache_url(network) or "").rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def get_proposal_votes(
        self,
        contract_principal: str,
        proposal_id: Union[int, str],
        bust_cache: bool = False,
    ) -> ProposalVotes:
        """
        Aggregate for/against counts of a proposal.

        Raises:
            ConfigurationError: If no cache URL is configured for the network
            ValidationError: If the principal or proposal id is missing
            ContractCacheError: If the cache service fails
        """
        if not self.base_url:
            logger.error("[ContractCache] Cache URL environment variable is not set")
            raise ConfigurationError("Cache URL is not configured.")
        if not contract_principal or proposal_id is None or proposal_id == "":
            raise ValidationError("Invalid contract principal or proposal ID.")

        contract_address, contract_name = split_contract_principal(contract_principal)
        url = f"{self.base_url}/contract-calls/read-only/{contract_address}/{contract_name}/get-proposal"
        body = {"functionArgs": [{"type": "uint", "value": str(proposal_id)}]}
        if bust_cache:
            body["cacheControl"] = {"bustCache": True, "ttl": BUST_CACHE_TTL_SECONDS}

        try:
            response = await self.client.post(url, json=body, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            logger.error(f"[ContractCache] Request to {url} failed: {e}")
            raise ContractCacheError(f"Failed to fetch proposal votes: {e}") from e

        if not response.is_success:
            logger.error(
                f"[ContractCache] Failed to fetch proposal votes from {url}: "
                f"{response.status_code} {response.text}"
            )
            raise ContractCacheError(
                f"Failed to fetch proposal votes: {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"[ContractCache] Invalid JSON from {url}: {e}")
            raise ContractCacheError("Invalid response format from cache service") from e

        vote_data = payload.get("data") if isinstance(payload, dict) else None
        vote_data = vote_data or payload
        if not isinstance(vote_data, dict):
            vote_data = {}

        votes_for = parse_vote_count(vote_data.get("votesFor"))
        votes_against = parse_vote_count(vote_data.get("votesAgainst"))

        return ProposalVotes(
            votes_for=votes_for,
            votes_against=votes_against,
            formatted_votes_for=format_votes(votes_for),
            formatted_votes_against=format_votes(votes_against),
        )

    async def close(self):
        await self.client.aclose()
