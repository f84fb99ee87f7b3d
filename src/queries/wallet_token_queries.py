"""
Token balances recorded per wallet (the ``holders`` table).
"""
from typing import List, Optional

from supabase import Client

from src.data_models.schemas import WalletToken
from src.services.supabase_client import get_supabase_client

TABLE = "holders"


def _list(client: Optional[Client], column: Optional[str] = None, value: Optional[str] = None) -> List[WalletToken]:
    client = client or get_supabase_client()
    query = client.table(TABLE).select("*")
    if column is not None:
        query = query.eq(column, value)
    response = query.order("created_at", desc=True).execute()
    return [WalletToken(**row) for row in response.data or []]


def fetch_wallet_tokens(client: Optional[Client] = None) -> List[WalletToken]:
    return _list(client)


def fetch_wallet_tokens_by_dao(dao_id: str, client: Optional[Client] = None) -> List[WalletToken]:
    return _list(client, "dao_id", dao_id)


def fetch_wallet_tokens_by_wallet(wallet_id: str, client: Optional[Client] = None) -> List[WalletToken]:
    return _list(client, "wallet_id", wallet_id)


def fetch_wallet_tokens_by_token(token_id: str, client: Optional[Client] = None) -> List[WalletToken]:
    return _list(client, "token_id", token_id)


def fetch_wallet_token(wallet_token_id: str, client: Optional[Client] = None) -> Optional[WalletToken]:
    client = client or get_supabase_client()
    response = client.table(TABLE).select("*").eq("id", wallet_token_id).limit(1).execute()
    if not response.data:
        return None
    return WalletToken(**response.data[0])
