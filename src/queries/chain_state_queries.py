"""
Chain state queries.

The backend records the latest Bitcoin and Stacks block heights per
network in ``chain_states``. Lookup failures are logged and reported as
empty results so block-height displays degrade instead of failing.
"""
from typing import List, Optional

from supabase import Client

from src.data_models.schemas import ChainState
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger


def fetch_chain_states(client: Optional[Client] = None) -> List[ChainState]:
    try:
        client = client or get_supabase_client()
        response = client.table("chain_states").select("*").order("created_at", desc=True).execute()
        return [ChainState(**row) for row in response.data or []]
    except Exception as e:
        logger.error(f"Error fetching chain states: {e}")
        return []


def fetch_chain_state_by_network(network: str, client: Optional[Client] = None) -> Optional[ChainState]:
    if not network:
        return None

    try:
        client = client or get_supabase_client()
        response = client.table("chain_states").select("*").eq("network", network).limit(1).execute()
    except Exception as e:
        logger.error(f"Error fetching chain state for network {network}: {e}")
        return None

    if not response.data:
        return None
    return ChainState(**response.data[0])


def fetch_latest_chain_state(client: Optional[Client] = None) -> Optional[ChainState]:
    """The most recently updated chain state."""
    try:
        client = client or get_supabase_client()
        response = (
            client.table("chain_states")
            .select("*")
            .order("updated_at", desc=True, nullsfirst=False)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching latest chain state: {e}")
        return None

    if not response.data:
        return None
    return ChainState(**response.data[0])


def bitcoin_block_height(state: Optional[ChainState]) -> int:
    """Bitcoin block height of a chain state, 0 when unknown."""
    if state is None or not state.bitcoin_block_height:
        return 0
    try:
        return int(state.bitcoin_block_height)
    except ValueError:
        return 0
