"""
Pydantic schemas for derived governance views: status badges, voting
windows, vote tallies and the proxy route payloads.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StatusConfig(BaseModel):
    """Presentation of a proposal status badge."""
    icon: str
    color: str
    bg: str
    border: str
    label: str


class VotingFlags(BaseModel):
    is_active: bool
    is_ended: bool


class VotingWindow(BaseModel):
    """Wall-clock bounds of a proposal's voting period."""
    start_block: int
    end_block: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_end_estimated: bool = False


class VoteTally(BaseModel):
    """Vote totals with shares of the liquid supply and of cast votes."""
    votes_for: int = 0
    votes_against: int = 0
    total_votes: int = 0
    liquid_tokens: int = 0
    percentage_for: float = 0.0
    percentage_against: float = 0.0
    percentage_remaining: float = 100.0
    cast_percentage_for: float = 0.0
    cast_percentage_against: float = 0.0


class ProposalVotes(BaseModel):
    """Aggregate on-chain vote counts as returned by the contract cache."""
    votes_for: str = "0"
    votes_against: str = "0"
    formatted_votes_for: str = "0"
    formatted_votes_against: str = "0"


class ProposalStats(BaseModel):
    total: int = 0
    active: int = 0
    passed: int = 0
    failed: int = 0


class ProposalPage(BaseModel):
    proposals: List[Dict[str, Any]] = Field(default_factory=list)
    stats: ProposalStats = Field(default_factory=ProposalStats)
    page: int = 1
    total_pages: int = 0


class ProposalDetail(BaseModel):
    proposal: Dict[str, Any]
    status: StatusConfig
    voting: VotingFlags
    window: Optional[VotingWindow] = None
    tally: VoteTally
    explorer_url: Optional[str] = None


class BlockTimesResponse(BaseModel):
    startBlockTime: Optional[str] = None
    endBlockTime: Optional[str] = None
