import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

# --------------------------------------------------
# Network Configuration
# --------------------------------------------------
# "mainnet" or "testnet"; everything network-specific keys off this value
STACKS_NETWORK = (os.environ.get("STACKS_NETWORK") or "testnet").strip().lower()

HIRO_API_URLS = {
    "mainnet": "https://api.hiro.so",
    "testnet": "https://api.testnet.hiro.so",
}

STACKS_NODE_API_URLS = {
    "mainnet": "https://stacks-node-api.mainnet.stacks.co",
    "testnet": "https://stacks-node-api.testnet.stacks.co",
}

# Caller context for read-only contract calls
READ_ONLY_SENDER_ADDRESS = os.environ.get("READ_ONLY_SENDER_ADDRESS", "ST000000000000000000002AMW42H")

# --------------------------------------------------
# External API Configuration
# --------------------------------------------------
HIRO_API_KEY = os.environ.get("HIRO_API_KEY", "")

# Read-only contract call cache service
CACHE_URL = os.environ.get("CACHE_URL")
CACHE_URL_TESTNET = os.environ.get("CACHE_URL_TESTNET")

# Agent backend (tools catalog, chat websocket)
API_URL = os.environ.get("API_URL")
WEBSOCKET_URL = os.environ.get("WEBSOCKET_URL", "ws://localhost:8000/chat/ws")

HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "30"))

# Comma-separated; "*" cannot be used because credentials are allowed
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# --------------------------------------------------
# Supabase Configuration
# --------------------------------------------------
SUPABASE_URL = os.environ.get("SUPABASE_URL")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY")

# DAOs shown on the dashboard; remove the filter to list every broadcasted DAO
SUPPORTED_DAOS = [
    "HUMAN•AIBTC•DAO",
    "FACEY•AIBTC•DAO",
    "UFACE•AIBTC•DAO",
    "SLOW•AIBTC•DAO",
    "FAST•AIBTC•DAO",
]

# --------------------------------------------------
# Caching Configuration
# --------------------------------------------------
BLOCK_TIME_CACHE_SECONDS = int(os.environ.get("BLOCK_TIME_CACHE_SECONDS", "600"))
BALANCE_CACHE_SECONDS = int(os.environ.get("BALANCE_CACHE_SECONDS", "1200"))
BLOCK_TIMES_RESPONSE_MAX_AGE = int(os.environ.get("BLOCK_TIMES_RESPONSE_MAX_AGE", "600"))


def is_testnet(network: str = None) -> bool:
    return (network or STACKS_NETWORK) == "testnet"


def get_hiro_api_url(network: str = None) -> str:
    """Hiro indexer API base URL for the network (mainnet unless testnet)."""
    return HIRO_API_URLS["testnet" if is_testnet(network) else "mainnet"]


def get_stacks_node_url(network: str = None) -> str:
    return STACKS_NODE_API_URLS["testnet" if is_testnet(network) else "mainnet"]


def get_cache_url(network: str = None) -> Optional[str]:
    return CACHE_URL_TESTNET if is_testnet(network) else CACHE_URL
