"""
Proposal vote routes: the on-chain ``get-proposal`` proxy, cached vote
counts, and the agent votes recorded in the database.
"""
from typing import Any, Dict, List, Optional

from fastapi import Depends
from fastapi.responses import JSONResponse
from supabase import Client

from src.auth.deps import get_current_user, get_user_supabase_client
from src.core.votes import extract_votes
from src.data_models.governance_schemas import ProposalVotes
from src.data_models.schemas import Vote
from src.exceptions import ValidationError
from src.queries.vote_queries import fetch_proposal_votes, fetch_votes
from src.routers.deps import get_contract_cache_client, get_stacks_node_client, run_query
from src.services.contract_cache_client import ContractCacheClient
from src.services.stacks_node_client import StacksNodeClient, split_contract_principal
from src.utils.logger import logger


def _parse_proposal_id(value: str) -> int:
    try:
        proposal_id = int(value.strip())
    except ValueError:
        proposal_id = -1
    if proposal_id < 0:
        raise ValidationError("Invalid proposalId. Expected a non-negative integer")
    return proposal_id


async def get_votes(
    contractAddress: Optional[str] = None,
    proposalId: Optional[str] = None,
    votesOnly: Optional[str] = None,
    node: StacksNodeClient = Depends(get_stacks_node_client),
):
    """
    Read a proposal straight from its voting contract.

    With ``votesOnly=true`` only the for/against counts are returned, when
    they can be located in the result.
    """
    if not contractAddress or not proposalId:
        return JSONResponse(
            {"success": False, "message": "Missing required parameters: contractAddress or proposalId"},
            status_code=400,
        )

    try:
        split_contract_principal(contractAddress)
        proposal_id = _parse_proposal_id(proposalId)
    except ValidationError as e:
        return JSONResponse({"success": False, "message": e.message, "data": None}, status_code=400)

    try:
        result = await node.get_proposal(contractAddress, proposal_id)
    except Exception as e:
        logger.error(f"get-proposal {contractAddress} #{proposalId} failed: {e}")
        message = getattr(e, "message", None) or str(e) or "An unknown error occurred"
        return JSONResponse(
            {"success": False, "message": message, "error": f"{type(e).__name__}: {message}"},
            status_code=500,
        )

    if votesOnly == "true":
        votes = extract_votes(result)
        if votes is not None:
            return {"success": True, **votes}

    return {
        "success": True,
        "message": "Proposal retrieved successfully",
        "data": result,
        "proposalId": proposalId,
        "contractAddress": contractAddress,
    }


async def get_cached_proposal_votes(
    contractPrincipal: str,
    proposalId: str,
    bustCache: bool = False,
    cache_client: ContractCacheClient = Depends(get_contract_cache_client),
) -> ProposalVotes:
    """Aggregate vote counts through the contract-call cache."""
    return await cache_client.get_proposal_votes(contractPrincipal, proposalId, bust_cache=bustCache)


async def get_proposal_votes(proposal_id: str) -> List[Vote]:
    """Agent votes cast on a proposal."""
    return await run_query(fetch_proposal_votes, proposal_id)


async def get_my_votes(
    user: Dict[str, Any] = Depends(get_current_user),
    db: Client = Depends(get_user_supabase_client),
) -> List[Vote]:
    """Votes cast by the signed-in user's agents."""
    return await run_query(fetch_votes, user["sub"], db)
