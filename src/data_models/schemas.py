"""
Pydantic schemas for the rows the dashboard reads from Supabase and the
payloads it reads from the Hiro API.

The tables are owned by the DAO backend; unknown columns are ignored so
schema additions upstream never break the dashboard.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Row(BaseModel):
    """Base for database rows: tolerant of extra columns and numeric text."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


# ==================
# Supabase Rows
# ==================

class Extension(Row):
    id: str
    dao_id: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    contract_principal: Optional[str] = None
    tx_id: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None


class DAO(Row):
    id: str
    name: str
    description: Optional[str] = None
    mission: Optional[str] = None
    image_url: Optional[str] = None
    is_broadcasted: Optional[bool] = None
    is_deployed: Optional[bool] = None
    created_at: Optional[str] = None
    extensions: List[Extension] = Field(default_factory=list)


class Token(Row):
    id: str
    dao_id: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimals: Optional[int] = None
    max_supply: Optional[str] = None
    contract_principal: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None


class Proposal(Row):
    id: str
    dao_id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    creator: Optional[str] = None
    contract_principal: Optional[str] = None
    proposal_id: Optional[int] = None
    action: Optional[str] = None
    vote_start: Optional[int] = None
    vote_end: Optional[int] = None
    votes_for: Optional[str] = None
    votes_against: Optional[str] = None
    liquid_tokens: Optional[str] = None
    status: Optional[str] = None
    concluded_by: Optional[str] = None
    executed: Optional[bool] = None
    passed: Optional[bool] = None
    tx_id: Optional[str] = None
    created_at: Optional[str] = None


class ProposalDAO(Row):
    name: Optional[str] = None
    description: Optional[str] = None


class ProposalWithDAO(Proposal):
    daos: Optional[ProposalDAO] = None


class Agent(Row):
    id: str
    name: Optional[str] = None
    profile_id: Optional[str] = None
    role: Optional[str] = None
    goal: Optional[str] = None
    backstory: Optional[str] = None
    image_url: Optional[str] = None
    is_archived: bool = False
    created_at: Optional[str] = None


class AgentUpdate(BaseModel):
    """Writable agent fields; unset fields are left untouched."""
    name: Optional[str] = None
    role: Optional[str] = None
    goal: Optional[str] = None
    backstory: Optional[str] = None
    image_url: Optional[str] = None


class AgentCreate(AgentUpdate):
    name: str
    profile_id: str


class Job(Row):
    """A run of a scheduled agent task."""
    id: str
    created_at: Optional[str] = None
    task_id: Optional[str] = None
    agent_id: Optional[str] = None
    profile_id: Optional[str] = None
    status: Optional[str] = None
    result: Optional[str] = None
    error: Optional[str] = None
    task_name: Optional[str] = None


class Wallet(Row):
    id: str
    profile_id: Optional[str] = None
    agent_id: Optional[str] = None
    mainnet_address: Optional[str] = None
    testnet_address: Optional[str] = None
    created_at: Optional[str] = None
    agent: Optional[Agent] = None


class Vote(Row):
    id: str
    created_at: Optional[str] = None
    dao_id: Optional[str] = None
    dao_name: str = "Unknown DAO"
    agent_id: Optional[str] = None
    agent_name: str = "Unknown Agent"
    answer: Optional[bool] = None
    proposal_id: Optional[str] = None
    proposal_title: str = "Unknown Proposal"
    reasoning: Optional[str] = None
    tx_id: Optional[str] = None
    amount: Optional[str] = None
    prompt: Optional[str] = None
    confidence: Optional[float] = None


class ChainState(Row):
    id: Optional[str] = None
    network: Optional[str] = None
    bitcoin_block_height: Optional[str] = None
    stacks_block_height: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WalletToken(Row):
    """A row of the ``holders`` table: one token balance held by a wallet."""
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    dao_id: Optional[str] = None
    token_id: Optional[str] = None
    wallet_id: Optional[str] = None
    amount: Optional[str] = None


class AgentPromptFields(BaseModel):
    dao_id: str
    agent_id: str
    name: str
    description: Optional[str] = None
    prompt_text: str
    prompt_type: str
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None


class AgentPromptUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    prompt_text: Optional[str] = None
    prompt_type: Optional[str] = None
    is_active: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class AgentPrompt(Row, AgentPromptFields):
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Tool(Row):
    id: str
    name: str
    description: str = ""
    category: str = ""
    parameters: Optional[str] = None


# ==================
# Hiro API Payloads
# ==================

class TokenBalance(Row):
    balance: str = "0"
    total_sent: str = "0"
    total_received: str = "0"


class NFTBalance(Row):
    count: int = 0
    total_sent: int = 0
    total_received: int = 0


class WalletBalance(Row):
    stx: TokenBalance = Field(default_factory=TokenBalance)
    fungible_tokens: Dict[str, TokenBalance] = Field(default_factory=dict)
    non_fungible_tokens: Dict[str, NFTBalance] = Field(default_factory=dict)


class Holder(BaseModel):
    address: str
    balance: str
    percentage: float


class HoldersResponse(BaseModel):
    holders: List[Holder]
    total_supply: float
    holder_count: int


class TreasuryToken(BaseModel):
    type: Literal["FT", "NFT"]
    name: str
    symbol: str
    amount: float
    value: float


class TokenPrice(BaseModel):
    """Price data for a DAO token, as quoted by the token's DEX."""
    price: float = 0.0
    market_cap: float = 0.0
    holders: int = 0
    price_24h_change: Optional[float] = None


class MarketStats(BaseModel):
    price: float
    market_cap: float
    treasury_balance: float
    holder_count: int


class WalletOverview(BaseModel):
    user_wallet: Optional[Wallet] = None
    agent_wallets: List[Wallet] = Field(default_factory=list)
    balances: Dict[str, WalletBalance] = Field(default_factory=dict)
    error: Optional[str] = None


# ==================
# Chat
# ==================

class ChatMessage(BaseModel):
    """A chat frame exchanged with the agent backend over the websocket."""
    model_config = ConfigDict(extra="allow")

    thread_id: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    content: Optional[str] = None
    status: Optional[str] = None
    agent_id: Optional[str] = None
