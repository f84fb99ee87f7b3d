from typing import List

from fastapi import Depends, Query

from src.data_models.schemas import (
    DAO,
    Extension,
    HoldersResponse,
    MarketStats,
    Proposal,
    Token,
    TokenPrice,
    TreasuryToken,
)
from src.exceptions import DAONotFoundError, ResourceNotFoundError
from src.queries.dao_queries import (
    fetch_dao_by_name,
    fetch_dao_extensions,
    fetch_daos_with_extensions,
    fetch_holders,
    fetch_market_stats,
    fetch_token,
    fetch_treasury_tokens,
)
from src.queries.proposal_queries import fetch_proposals
from src.routers.deps import get_hiro_client, run_query
from src.services.hiro_client import HiroAPIClient
from src.utils.logger import logger

TREASURY_EXTENSION = "aibtc-treasury"


async def _require_token(dao_id: str) -> Token:
    token = await run_query(fetch_token, dao_id)
    if token is None or not token.contract_principal or not token.symbol:
        raise ResourceNotFoundError(f"No token found for DAO {dao_id}")
    return token


async def list_daos() -> List[DAO]:
    """Listed DAOs with their extensions."""
    return await run_query(fetch_daos_with_extensions)


async def get_dao(name: str) -> DAO:
    dao = await run_query(fetch_dao_by_name, name)
    if dao is None:
        raise DAONotFoundError(name)
    dao.extensions = await run_query(fetch_dao_extensions, dao.id)
    return dao


async def get_dao_extensions(dao_id: str) -> List[Extension]:
    return await run_query(fetch_dao_extensions, dao_id)


async def get_dao_token(dao_id: str) -> Token:
    token = await run_query(fetch_token, dao_id)
    if token is None:
        raise ResourceNotFoundError(f"No token found for DAO {dao_id}")
    return token


async def get_dao_proposals(dao_id: str) -> List[Proposal]:
    return await run_query(fetch_proposals, dao_id)


async def get_dao_holders(
    dao_id: str,
    hiro: HiroAPIClient = Depends(get_hiro_client),
) -> HoldersResponse:
    """Holders of the DAO token with their share of supply."""
    token = await _require_token(dao_id)
    return await fetch_holders(hiro, token.contract_principal, token.symbol)


async def get_dao_treasury(
    dao_id: str,
    price: float = Query(0.0, ge=0),
    hiro: HiroAPIClient = Depends(get_hiro_client),
) -> List[TreasuryToken]:
    """
    Holdings of the DAO treasury contract.

    Token values are ``amount * price``; the price is quoted by the caller.
    """
    extensions = await run_query(fetch_dao_extensions, dao_id)
    treasury = next((ext for ext in extensions if ext.type == TREASURY_EXTENSION), None)
    if treasury is None or not treasury.contract_principal:
        logger.warning(f"DAO {dao_id} has no treasury extension")
        raise ResourceNotFoundError(f"No treasury found for DAO {dao_id}")
    return await fetch_treasury_tokens(hiro, treasury.contract_principal, price)


async def get_dao_market_stats(
    dao_id: str,
    price: float = Query(0.0, ge=0),
    market_cap: float = Query(0.0, ge=0),
    hiro: HiroAPIClient = Depends(get_hiro_client),
) -> MarketStats:
    token = await _require_token(dao_id)
    try:
        max_supply = float(token.max_supply or 0)
    except ValueError:
        max_supply = 0.0

    return await fetch_market_stats(
        hiro,
        token.contract_principal,
        token.symbol,
        max_supply,
        TokenPrice(price=price, market_cap=market_cap),
    )
