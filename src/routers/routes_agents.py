from typing import List, Optional

from src.data_models.schemas import Agent
from src.exceptions import ResourceNotFoundError
from src.queries.agent_queries import fetch_agent_by_id, fetch_agents
from src.routers.deps import run_query


async def list_agents(filter_by_name: Optional[str] = None, include_archived: bool = False) -> List[Agent]:
    return await run_query(fetch_agents, filter_by_name=filter_by_name, include_archived=include_archived)


async def get_agent(agent_id: str) -> Agent:
    agent = await run_query(fetch_agent_by_id, agent_id)
    if agent is None:
        raise ResourceNotFoundError(f"Agent '{agent_id}' not found")
    return agent
