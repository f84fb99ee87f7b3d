"""
Agent queries.

Every function logs and swallows database errors, returning an empty list
or None; agent pickers and the chat view render without agents rather than
failing the page.
"""
from typing import List, Optional

from supabase import Client

from src.data_models.schemas import Agent, AgentCreate, AgentUpdate
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger


def fetch_agents(
    filter_by_name: Optional[str] = None,
    include_archived: bool = False,
    client: Optional[Client] = None,
) -> List[Agent]:
    """Agents ordered with active ones first, then by name."""
    try:
        client = client or get_supabase_client()
        query = (
            client.table("agents")
            .select("*")
            .order("is_archived")
            .order("name")
        )
        if filter_by_name:
            query = query.eq("name", filter_by_name)
        if not include_archived:
            query = query.eq("is_archived", False)
        response = query.execute()
    except Exception as e:
        logger.error(f"Error fetching agents: {e}")
        return []
    return [Agent(**row) for row in response.data or []]


def fetch_agent_by_id(agent_id: Optional[str], client: Optional[Client] = None) -> Optional[Agent]:
    if not agent_id:
        return None

    try:
        client = client or get_supabase_client()
        response = client.table("agents").select("*").eq("id", agent_id).limit(1).execute()
    except Exception as e:
        logger.error(f"Error fetching agent with ID {agent_id}: {e}")
        return None

    if not response.data:
        return None
    return Agent(**response.data[0])


def fetch_agent_name(agent_id: Optional[str], client: Optional[Client] = None) -> Optional[str]:
    if not agent_id:
        return None

    try:
        client = client or get_supabase_client()
        response = client.table("agents").select("name").eq("id", agent_id).limit(1).execute()
    except Exception as e:
        logger.error(f"Error fetching agent name for ID {agent_id}: {e}")
        return None

    if not response.data:
        return None
    return response.data[0].get("name") or None


def create_agent(agent: AgentCreate, client: Optional[Client] = None) -> Optional[Agent]:
    try:
        client = client or get_supabase_client()
        response = client.table("agents").insert(agent.model_dump(exclude_none=True)).execute()
    except Exception as e:
        logger.error(f"Error creating agent: {e}")
        return None
    return Agent(**response.data[0]) if response.data else None


def _update(agent_id: str, payload: dict, client: Optional[Client], action: str) -> Optional[Agent]:
    try:
        client = client or get_supabase_client()
        response = client.table("agents").update(payload).eq("id", agent_id).execute()
    except Exception as e:
        logger.error(f"Error {action} agent with ID {agent_id}: {e}")
        return None
    return Agent(**response.data[0]) if response.data else None


def update_agent(agent_id: str, updates: AgentUpdate, client: Optional[Client] = None) -> Optional[Agent]:
    """Apply the fields set on ``updates``; returns the updated agent."""
    payload = updates.model_dump(exclude_unset=True)
    if not payload:
        return fetch_agent_by_id(agent_id, client)
    return _update(agent_id, payload, client, "updating")


def archive_agent(agent_id: str, archive: bool, client: Optional[Client] = None) -> Optional[Agent]:
    return _update(agent_id, {"is_archived": archive}, client, "archiving" if archive else "unarchiving")
