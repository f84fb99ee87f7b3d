"""
DAO, token and treasury queries.

Database reads go through supabase-py; holder and treasury figures come
from the Hiro API.
"""
import asyncio
from typing import List, Optional
from urllib.parse import unquote

from supabase import Client

from src.config.settings import SUPPORTED_DAOS
from src.data_models.schemas import (
    DAO,
    Extension,
    Holder,
    HoldersResponse,
    MarketStats,
    Token,
    TokenPrice,
    TreasuryToken,
)
from src.services.hiro_client import HiroAPIClient
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger

MICRO_UNITS = 1_000_000
# Share of max supply held by the treasury at launch
TREASURY_SUPPLY_SHARE = 0.8


def _listed_daos_query(client: Client):
    # Remove the name filter to list every broadcasted DAO
    return (
        client.table("daos")
        .select("*")
        .order("created_at", desc=True)
        .eq("is_broadcasted", True)
        .in_("name", SUPPORTED_DAOS)
    )


def fetch_extensions(client: Optional[Client] = None) -> List[Extension]:
    client = client or get_supabase_client()
    response = client.table("extensions").select("*").execute()
    return [Extension(**row) for row in response.data or []]


def fetch_daos(client: Optional[Client] = None) -> List[DAO]:
    """Broadcasted DAOs on the supported list, newest first."""
    client = client or get_supabase_client()
    response = _listed_daos_query(client).execute()
    return [DAO(**row) for row in response.data or []]


def fetch_daos_with_extensions(client: Optional[Client] = None) -> List[DAO]:
    client = client or get_supabase_client()
    daos = fetch_daos(client)
    extensions = fetch_extensions(client)

    for dao in daos:
        dao.extensions = [ext for ext in extensions if ext.dao_id == dao.id]
    return daos


def fetch_dao_by_name(encoded_name: str, client: Optional[Client] = None) -> Optional[DAO]:
    """A broadcasted DAO by its (possibly URL-encoded) name."""
    client = client or get_supabase_client()
    name = unquote(encoded_name)
    response = (
        client.table("daos")
        .select("*")
        .eq("name", name)
        .eq("is_broadcasted", True)
        .limit(1)
        .execute()
    )
    if not response.data:
        logger.error(f"No DAO found with name: {name}")
        return None
    return DAO(**response.data[0])


def fetch_dao_extensions(dao_id: str, client: Optional[Client] = None) -> List[Extension]:
    client = client or get_supabase_client()
    response = client.table("extensions").select("*").eq("dao_id", dao_id).execute()
    return [Extension(**row) for row in response.data or []]


def fetch_tokens(client: Optional[Client] = None) -> List[Token]:
    client = client or get_supabase_client()
    response = client.table("tokens").select("*").execute()
    return [Token(**row) for row in response.data or []]


def fetch_token(dao_id: str, client: Optional[Client] = None) -> Optional[Token]:
    """The token of a DAO."""
    client = client or get_supabase_client()
    response = client.table("tokens").select("*").eq("dao_id", dao_id).limit(1).execute()
    if not response.data:
        return None
    return Token(**response.data[0])


def find_extension(dao: DAO, extension_type: str) -> Optional[Extension]:
    return next((ext for ext in dao.extensions if ext.type == extension_type), None)


# ==================
# Hiro-backed
# ==================

async def fetch_holders(hiro: HiroAPIClient, contract_principal: str, token_symbol: str) -> HoldersResponse:
    """Token holders with each holder's share of the total supply."""
    data = await hiro.get_token_holders(contract_principal, token_symbol)
    total_supply = float(data.get("total_supply") or 0)

    holders = []
    for holder in data.get("results") or []:
        balance = str(holder.get("balance", "0"))
        percentage = (float(balance) / total_supply) * 100 if total_supply else 0.0
        holders.append(Holder(address=holder["address"], balance=balance, percentage=percentage))

    return HoldersResponse(
        holders=holders,
        total_supply=total_supply,
        holder_count=int(data.get("total") or 0),
    )


async def fetch_treasury_tokens(hiro: HiroAPIClient, treasury_address: str, token_price: float) -> List[TreasuryToken]:
    """STX, fungible and non-fungible holdings of a treasury."""
    balances = await hiro.get_address_balances(treasury_address)
    tokens: List[TreasuryToken] = []

    stx_balance = float(balances.stx.balance or 0)
    if stx_balance > 0:
        amount = stx_balance / MICRO_UNITS
        tokens.append(TreasuryToken(type="FT", name="Stacks", symbol="STX", amount=amount, value=amount * token_price))

    for asset_identifier, token_data in balances.fungible_tokens.items():
        _, _, token_info = asset_identifier.partition("::")
        amount = float(token_data.balance or 0) / MICRO_UNITS
        tokens.append(TreasuryToken(
            type="FT",
            name=token_info or asset_identifier,
            symbol=token_info,
            amount=amount,
            value=amount * token_price,
        ))

    for asset_identifier in balances.non_fungible_tokens:
        _, _, nft_info = asset_identifier.partition("::")
        tokens.append(TreasuryToken(
            type="NFT",
            name=nft_info or asset_identifier,
            symbol=nft_info,
            amount=1,
            value=0,
        ))

    return tokens


async def fetch_market_stats(
    hiro: HiroAPIClient,
    contract_principal: str,
    token_symbol: str,
    max_supply: float,
    token_price: TokenPrice,
) -> MarketStats:
    """Price, market cap, treasury value and holder count of a DAO token."""
    holders = await fetch_holders(hiro, contract_principal, token_symbol)
    return MarketStats(
        price=token_price.price,
        market_cap=token_price.market_cap,
        treasury_balance=max_supply * TREASURY_SUPPLY_SHARE * token_price.price,
        holder_count=holders.holder_count or token_price.holders,
    )


async def fetch_dao_overview(name: str, client: Optional[Client] = None) -> Optional[dict]:
    """DAO with its extensions and token, fetched together."""
    client = client or get_supabase_client()
    dao = await asyncio.to_thread(fetch_dao_by_name, name, client)
    if dao is None:
        return None
    extensions, token = await asyncio.gather(
        asyncio.to_thread(fetch_dao_extensions, dao.id, client),
        asyncio.to_thread(fetch_token, dao.id, client),
    )
    dao.extensions = extensions
    return {"dao": dao, "token": token}
