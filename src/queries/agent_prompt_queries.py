"""
Per-DAO prompts that steer an agent's voting.
"""
from typing import List, Optional

from supabase import Client

from src.data_models.schemas import AgentPrompt, AgentPromptFields, AgentPromptUpdate
from src.services.supabase_client import get_supabase_client

TABLE = "agent_prompts"


def _list(client: Optional[Client], column: Optional[str] = None, value: Optional[str] = None) -> List[AgentPrompt]:
    client = client or get_supabase_client()
    query = client.table(TABLE).select("*")
    if column is not None:
        query = query.eq(column, value)
    response = query.order("created_at", desc=True).execute()
    return [AgentPrompt(**row) for row in response.data or []]


def fetch_agent_prompts(client: Optional[Client] = None) -> List[AgentPrompt]:
    return _list(client)


def fetch_agent_prompts_by_dao(dao_id: str, client: Optional[Client] = None) -> List[AgentPrompt]:
    return _list(client, "dao_id", dao_id)


def fetch_agent_prompts_by_agent(agent_id: str, client: Optional[Client] = None) -> List[AgentPrompt]:
    return _list(client, "agent_id", agent_id)


def fetch_agent_prompt(prompt_id: str, client: Optional[Client] = None) -> Optional[AgentPrompt]:
    client = client or get_supabase_client()
    response = client.table(TABLE).select("*").eq("id", prompt_id).limit(1).execute()
    if not response.data:
        return None
    return AgentPrompt(**response.data[0])


def create_agent_prompt(prompt: AgentPromptFields, client: Optional[Client] = None) -> AgentPrompt:
    client = client or get_supabase_client()
    response = client.table(TABLE).insert(prompt.model_dump()).execute()
    return AgentPrompt(**response.data[0])


def update_agent_prompt(prompt_id: str, updates: AgentPromptUpdate, client: Optional[Client] = None) -> Optional[AgentPrompt]:
    client = client or get_supabase_client()
    response = client.table(TABLE).update(updates.model_dump(exclude_unset=True)).eq("id", prompt_id).execute()
    if not response.data:
        return None
    return AgentPrompt(**response.data[0])


def delete_agent_prompt(prompt_id: str, client: Optional[Client] = None) -> None:
    client = client or get_supabase_client()
    client.table(TABLE).delete().eq("id", prompt_id).execute()
