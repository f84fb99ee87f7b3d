"""
Wallet routes: the signed-in user's wallets with balances, and the balance
of any address.
"""
from typing import Any, Dict

from fastapi import Depends
from supabase import Client

from src.auth.deps import get_current_user, get_user_supabase_client
from src.data_models.schemas import WalletBalance, WalletOverview
from src.queries.wallet_queries import fetch_wallet_balance
from src.routers.deps import get_hiro_client
from src.services.hiro_client import HiroAPIClient
from src.stores.wallet import WalletStore


async def get_my_wallets(
    user: Dict[str, Any] = Depends(get_current_user),
    hiro: HiroAPIClient = Depends(get_hiro_client),
    db: Client = Depends(get_user_supabase_client),
) -> WalletOverview:
    """
    The user's own wallet, their agents' wallets and every balance.

    Lookup failures are reported in ``error`` alongside whatever loaded.
    """
    store = WalletStore(hiro, client=db)
    await store.fetch_wallets(user["sub"])
    return store.overview()


async def get_wallet_balance(
    address: str,
    hiro: HiroAPIClient = Depends(get_hiro_client),
) -> WalletBalance:
    return await fetch_wallet_balance(address, hiro)
