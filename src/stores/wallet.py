"""
Wallet store: a user's own wallet, their agents' wallets and the balances
of all of them on the configured network.
"""
import asyncio
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from supabase import Client

from src.config.settings import STACKS_NETWORK
from src.data_models.schemas import Wallet, WalletBalance, WalletOverview
from src.queries.wallet_queries import (
    balance_cache,
    fetch_wallet_balance,
    fetch_wallet_balances,
    fetch_wallets,
    get_wallet_address,
)
from src.services.hiro_client import HiroAPIClient
from src.services.response_cache import TTLCache
from src.stores.base import Store
from src.utils.logger import logger


class WalletState(BaseModel):
    balances: Dict[str, WalletBalance] = Field(default_factory=dict)
    user_wallet: Optional[Wallet] = None
    agent_wallets: List[Wallet] = Field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None


class WalletStore(Store[WalletState]):
    def __init__(
        self,
        hiro: HiroAPIClient,
        client: Optional[Client] = None,
        network: str = None,
        cache: Optional[TTLCache] = None,
    ):
        super().__init__(WalletState())
        self.hiro = hiro
        self.client = client
        self.network = network or STACKS_NETWORK
        self.cache = cache if cache is not None else balance_cache

    async def fetch_wallets(self, user_id: Optional[str]) -> None:
        """Load the user's wallets, split them by owner, and fetch their balances."""
        if not user_id:
            self.set_state({"user_wallet": None, "agent_wallets": [], "is_loading": False})
            return

        try:
            self.set_state({"is_loading": True, "error": None})
            wallets = await asyncio.to_thread(fetch_wallets, user_id, self.client)

            user_wallet = next((wallet for wallet in wallets if wallet.agent_id is None), None)
            agent_wallets = [wallet for wallet in wallets if wallet.agent_id is not None]

            addresses = [
                address for address in (get_wallet_address(wallet, self.network) for wallet in wallets)
                if address
            ]
            if addresses:
                await self.fetch_balances(addresses)

            self.set_state({"user_wallet": user_wallet, "agent_wallets": agent_wallets, "is_loading": False})
        except Exception as e:
            logger.error(f"Failed to fetch wallets for {user_id}: {e}")
            self.set_state({"error": str(e) or "Failed to fetch wallets", "is_loading": False})

    async def fetch_single_balance(self, address: str) -> Optional[WalletBalance]:
        try:
            self.set_state({"is_loading": True, "error": None})
            balance = await fetch_wallet_balance(address, self.hiro, self.cache)
        except Exception as e:
            self.set_state({
                "error": str(e) or f"Failed to fetch balance for {address}",
                "is_loading": False,
            })
            return None

        self.set_state(lambda state: {
            "balances": {**state.balances, address: balance},
            "is_loading": False,
        })
        return balance

    async def fetch_balances(self, addresses: List[str]) -> None:
        """
        Fetch balances for several addresses and merge them in.

        A failed lookup records the error; balances already held are kept.
        """
        try:
            self.set_state({"is_loading": True, "error": None})
            new_balances = await fetch_wallet_balances(addresses, self.hiro, self.cache)
        except Exception as e:
            self.set_state({"error": str(e) or "Failed to fetch balances", "is_loading": False})
            return

        self.set_state(lambda state: {
            "balances": {**state.balances, **new_balances},
            "is_loading": False,
        })

    def overview(self) -> WalletOverview:
        state = self.get_state()
        return WalletOverview(
            user_wallet=state.user_wallet,
            agent_wallets=state.agent_wallets,
            balances=state.balances,
            error=state.error,
        )
