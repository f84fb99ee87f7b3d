"""
Agent vote queries.
"""
from typing import Any, Dict, List, Optional

from supabase import Client

from src.data_models.schemas import Vote
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger

VOTE_COLUMNS = "id, created_at, dao_id, agent_id, answer, proposal_id, reasoning, tx_id, amount, prompt, confidence"

PROPOSAL_VOTE_COLUMNS = f"""
    {VOTE_COLUMNS},
    agents ( id, name ),
    daos ( id, name )
"""


def _joined_name(related: Any) -> Optional[str]:
    """Name of an embedded row; the client returns either a list or a single object."""
    if isinstance(related, list):
        related = related[0] if related else None
    if isinstance(related, dict):
        return related.get("name")
    return None


def fetch_proposal_votes(proposal_id: str, client: Optional[Client] = None) -> List[Vote]:
    """Votes on one proposal with agent and DAO names, newest first."""
    if not proposal_id:
        logger.warning("fetch_proposal_votes called with empty proposal_id")
        return []

    client = client or get_supabase_client()
    response = (
        client.table("votes")
        .select(PROPOSAL_VOTE_COLUMNS)
        .eq("proposal_id", proposal_id)
        .order("created_at", desc=True)
        .execute()
    )

    votes = []
    for row in response.data or []:
        agent_name = _joined_name(row.pop("agents", None))
        dao_name = _joined_name(row.pop("daos", None))
        votes.append(Vote(
            **row,
            agent_name=agent_name or "Unknown Agent",
            dao_name=dao_name or "Unknown DAO",
            proposal_title="Current Proposal",
        ))
    return votes


def _name_map(client: Client, table: str, label_column: str, ids: List[str]) -> Dict[str, str]:
    if not ids:
        return {}
    response = client.table(table).select(f"id, {label_column}").in_("id", ids).execute()
    return {row["id"]: row.get(label_column) for row in response.data or []}


def fetch_votes(user_id: str, client: Optional[Client] = None) -> List[Vote]:
    """Votes cast by the agents of a user, newest first."""
    client = client or get_supabase_client()

    agents_response = client.table("agents").select("id").eq("profile_id", user_id).execute()
    agent_ids = [agent["id"] for agent in agents_response.data or []]
    if not agent_ids:
        return []

    response = (
        client.table("votes")
        .select(VOTE_COLUMNS)
        .in_("agent_id", agent_ids)
        .order("created_at", desc=True)
        .execute()
    )
    rows = response.data or []
    if not rows:
        return []

    def distinct(column: str) -> List[str]:
        return sorted({row[column] for row in rows if row.get(column)})

    agent_names = _name_map(client, "agents", "name", distinct("agent_id"))
    dao_names = _name_map(client, "daos", "name", distinct("dao_id"))
    proposal_titles = _name_map(client, "proposals", "title", distinct("proposal_id"))

    return [
        Vote(
            **row,
            agent_name=agent_names.get(row.get("agent_id")) or "Unknown Agent",
            dao_name=dao_names.get(row.get("dao_id")) or "Unknown DAO",
            proposal_title=proposal_titles.get(row.get("proposal_id")) or "Unknown Proposal",
        )
        for row in rows
    ]
