from typing import Optional

from src.config.settings import STACKS_NETWORK
from src.data_models.schemas import ChainState
from src.exceptions import ResourceNotFoundError
from src.queries.chain_state_queries import fetch_chain_state_by_network, fetch_latest_chain_state
from src.routers.deps import run_query


async def get_latest_chain_state() -> Optional[ChainState]:
    """Most recently updated chain state, or null when none is recorded."""
    return await run_query(fetch_latest_chain_state)


async def get_chain_state(network: str = STACKS_NETWORK) -> ChainState:
    state = await run_query(fetch_chain_state_by_network, network)
    if state is None:
        raise ResourceNotFoundError(f"No chain state recorded for network {network}")
    return state
