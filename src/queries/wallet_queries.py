"""
Wallet queries: wallet rows from Supabase, balances from the Hiro API.
"""
import asyncio
from typing import Dict, List, Optional

from supabase import Client

from src.config.settings import BALANCE_CACHE_SECONDS, STACKS_NETWORK
from src.data_models.schemas import Wallet, WalletBalance
from src.services.hiro_client import HiroAPIClient
from src.services.response_cache import TTLCache
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger

balance_cache = TTLCache(BALANCE_CACHE_SECONDS, name="wallet-balances")


def fetch_wallets(user_id: Optional[str], client: Optional[Client] = None) -> List[Wallet]:
    """Wallets of a user with their agents."""
    if not user_id:
        return []

    client = client or get_supabase_client()
    try:
        response = (
            client.table("wallets")
            .select("*, agent:agents(*)")
            .eq("profile_id", user_id)
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching wallets: {e}")
        raise
    return [Wallet(**row) for row in response.data or []]


async def fetch_wallet_balance(
    address: str,
    hiro: HiroAPIClient,
    cache: Optional[TTLCache] = balance_cache,
) -> WalletBalance:
    """
    Balances of one address.

    Raises:
        HiroAPIError: If the balance lookup fails
    """
    async def load() -> WalletBalance:
        try:
            return await hiro.get_address_balances(address)
        except Exception as e:
            logger.error(f"Error fetching balance for {address}: {e}")
            raise

    if cache is None:
        return await load()
    return await cache.get_or_fetch(f"balance:{hiro.base_url}:{address}", load)


async def fetch_wallet_balances(
    addresses: List[str],
    hiro: HiroAPIClient,
    cache: Optional[TTLCache] = balance_cache,
) -> Dict[str, WalletBalance]:
    """Balances of several addresses, fetched in parallel."""
    balances = await asyncio.gather(
        *(fetch_wallet_balance(address, hiro, cache) for address in addresses)
    )
    return dict(zip(addresses, balances))


def get_wallet_address(wallet: Optional[Wallet], network: str = None) -> Optional[str]:
    """The wallet's address on the given network."""
    if wallet is None:
        return None
    if (network or STACKS_NETWORK) == "mainnet":
        return wallet.mainnet_address
    return wallet.testnet_address
