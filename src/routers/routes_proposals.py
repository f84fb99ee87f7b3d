"""
Proposal list and detail routes.

The list endpoint filters, sorts and paginates the full proposal set in
memory; counts in ``stats`` describe the filtered set, not just the page.
"""
import math
from typing import Optional

from fastapi import Depends, Query

from src.config.settings import STACKS_NETWORK
from src.core.block_time import BlockTimeResolver
from src.core.formatting import get_explorer_link
from src.core.proposal_status import (
    SORT_FIELDS,
    STATUS_FILTERS,
    filter_proposals,
    get_status_config,
    proposal_stats,
    sort_proposals,
    voting_flags,
)
from src.core.votes import tally_votes
from src.data_models.governance_schemas import ProposalDetail, ProposalPage
from src.data_models.schemas import ProposalWithDAO
from src.exceptions import ProposalNotFoundError, ValidationError
from src.queries.proposal_queries import fetch_all_proposals, fetch_proposal
from src.routers.deps import get_block_time_resolver, run_query

PROPOSALS_PER_PAGE = 20


def paginate(items: list, page: int, per_page: int) -> list:
    start = (page - 1) * per_page
    return items[start:start + per_page]


async def list_proposals(
    search: Optional[str] = None,
    dao: Optional[str] = None,
    status: Optional[str] = None,
    creator: Optional[str] = None,
    sort: str = "newest",
    page: int = Query(1, ge=1),
    per_page: int = Query(PROPOSALS_PER_PAGE, ge=1, le=100),
) -> ProposalPage:
    """Proposals across all DAOs, filtered, sorted and paginated."""
    if sort not in SORT_FIELDS:
        raise ValidationError(f"Unknown sort '{sort}'. Expected one of: {', '.join(SORT_FIELDS)}")
    if status and status != "all" and status not in STATUS_FILTERS:
        raise ValidationError(f"Unknown status '{status}'. Expected one of: {', '.join(STATUS_FILTERS)}")

    proposals = filter_proposals(
        await run_query(fetch_all_proposals),
        search=search,
        dao=dao,
        status=status,
        creator=creator,
    )
    proposals = sort_proposals(proposals, sort)

    return ProposalPage(
        proposals=[p.model_dump() for p in paginate(proposals, page, per_page)],
        stats=proposal_stats(proposals),
        page=page,
        total_pages=math.ceil(len(proposals) / per_page),
    )


async def build_proposal_detail(
    proposal: ProposalWithDAO,
    resolver: BlockTimeResolver,
    network: str = None,
) -> ProposalDetail:
    window = None
    if proposal.vote_start and proposal.vote_end:
        window = await resolver.resolve_voting_window(proposal.vote_start, proposal.vote_end)

    flags = voting_flags(window, proposal.status)
    explorer_url = get_explorer_link("tx", proposal.tx_id, network or STACKS_NETWORK) if proposal.tx_id else None

    return ProposalDetail(
        proposal=proposal.model_dump(),
        status=get_status_config(flags.is_active, flags.is_ended, bool(proposal.passed)),
        voting=flags,
        window=window,
        tally=tally_votes(proposal.votes_for, proposal.votes_against, proposal.liquid_tokens),
        explorer_url=explorer_url,
    )


async def get_proposal(
    proposal_id: str,
    resolver: BlockTimeResolver = Depends(get_block_time_resolver),
) -> ProposalDetail:
    """One proposal with its status badge, voting window and vote tally."""
    proposal = await run_query(fetch_proposal, proposal_id)
    if proposal is None:
        raise ProposalNotFoundError(proposal_id)
    return await build_proposal_detail(proposal, resolver, resolver.network)
