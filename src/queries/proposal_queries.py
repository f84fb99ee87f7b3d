from typing import List, Optional

from supabase import Client

from src.data_models.schemas import Proposal, ProposalWithDAO
from src.services.supabase_client import get_supabase_client

PROPOSAL_WITH_DAO_COLUMNS = """
    *,
    daos:dao_id (
        name,
        description
    )
"""


def fetch_proposals(dao_id: str, client: Optional[Client] = None) -> List[Proposal]:
    """Proposals of one DAO, newest first."""
    client = client or get_supabase_client()
    response = (
        client.table("proposals")
        .select("*")
        .eq("dao_id", dao_id)
        .order("created_at", desc=True)
        .execute()
    )
    return [Proposal(**row) for row in response.data or []]


def fetch_all_proposals(client: Optional[Client] = None) -> List[ProposalWithDAO]:
    """Proposals across all DAOs with their DAO's name and description, newest first."""
    client = client or get_supabase_client()
    response = (
        client.table("proposals")
        .select(PROPOSAL_WITH_DAO_COLUMNS)
        .order("created_at", desc=True)
        .execute()
    )
    return [ProposalWithDAO(**row) for row in response.data or []]


def fetch_proposal(proposal_id: str, client: Optional[Client] = None) -> Optional[ProposalWithDAO]:
    client = client or get_supabase_client()
    response = (
        client.table("proposals")
        .select(PROPOSAL_WITH_DAO_COLUMNS)
        .eq("id", proposal_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return ProposalWithDAO(**response.data[0])
