"""
Process-wide Supabase client.

Public reads go through one anon-key client. Reads scoped to the signed-in
user go through a client carrying their access token, so row-level
security on the database decides what each request may see.
"""
import threading
from typing import Optional

from supabase import Client, create_client

from src.config.settings import SUPABASE_ANON_KEY, SUPABASE_URL
from src.exceptions import ConfigurationError
from src.utils.logger import logger

_supabase_client: Optional[Client] = None
_client_lock = threading.Lock()


def get_supabase_client() -> Client:
    """Get the global Supabase client instance."""
    global _supabase_client

    with _client_lock:
        if _supabase_client is None:
            if not SUPABASE_URL or not SUPABASE_ANON_KEY:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")
            _supabase_client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
            logger.info("Supabase client initialized")
        return _supabase_client


def set_supabase_client(client: Optional[Client]) -> None:
    """Replace the global client (tests, or a pre-authenticated client)."""
    global _supabase_client

    with _client_lock:
        _supabase_client = client


def create_user_client(access_token: str) -> Client:
    """A client whose database requests run as the user owning ``access_token``."""
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")
    client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    client.postgrest.auth(access_token)
    return client
