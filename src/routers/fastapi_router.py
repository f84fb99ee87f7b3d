from fastapi import APIRouter

from .routes_agents import get_agent, list_agents
from .routes_block_times import get_block_times
from .routes_chain_state import get_chain_state, get_latest_chain_state
from .routes_daos import (
    get_dao,
    get_dao_extensions,
    get_dao_holders,
    get_dao_market_stats,
    get_dao_proposals,
    get_dao_token,
    get_dao_treasury,
    list_daos,
)
from .routes_proposals import get_proposal, list_proposals
from .routes_tools import list_tools
from .routes_votes import get_cached_proposal_votes, get_my_votes, get_proposal_votes, get_votes
from .routes_wallets import get_my_wallets, get_wallet_balance

# Static paths are registered before parameterized ones that could shadow them
router = APIRouter()

# Upstream proxies
router.add_api_route("/block-times", get_block_times, methods=["GET"], tags=["chain"])
router.add_api_route("/votes", get_votes, methods=["GET"], tags=["votes"])
router.add_api_route("/votes/me", get_my_votes, methods=["GET"], tags=["votes"])

# DAOs
router.add_api_route("/daos", list_daos, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{name}", get_dao, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/extensions", get_dao_extensions, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/token", get_dao_token, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/proposals", get_dao_proposals, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/holders", get_dao_holders, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/treasury", get_dao_treasury, methods=["GET"], tags=["daos"])
router.add_api_route("/daos/{dao_id}/market-stats", get_dao_market_stats, methods=["GET"], tags=["daos"])

# Proposals
router.add_api_route("/proposals", list_proposals, methods=["GET"], tags=["proposals"])
router.add_api_route("/proposals/votes/cached", get_cached_proposal_votes, methods=["GET"], tags=["proposals"])
router.add_api_route("/proposals/{proposal_id}", get_proposal, methods=["GET"], tags=["proposals"])
router.add_api_route("/proposals/{proposal_id}/votes", get_proposal_votes, methods=["GET"], tags=["proposals"])

# Chain state
router.add_api_route("/chain-state/latest", get_latest_chain_state, methods=["GET"], tags=["chain"])
router.add_api_route("/chain-state/{network}", get_chain_state, methods=["GET"], tags=["chain"])

# Wallets
router.add_api_route("/wallets/me", get_my_wallets, methods=["GET"], tags=["wallets"])
router.add_api_route("/wallets/{address}/balance", get_wallet_balance, methods=["GET"], tags=["wallets"])

# Agents and tools
router.add_api_route("/agents", list_agents, methods=["GET"], tags=["agents"])
router.add_api_route("/agents/{agent_id}", get_agent, methods=["GET"], tags=["agents"])
router.add_api_route("/tools", list_tools, methods=["GET"], tags=["tools"])
