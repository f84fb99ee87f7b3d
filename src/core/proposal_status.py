"""
Proposal status classification and list-page filtering.

A proposal's badge is derived from three flags in a fixed order:
active wins over ended, and an ended proposal is Passed or Failed by its
``passed`` column. Anything else is Pending.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from src.core.formatting import safe_int
from src.data_models.governance_schemas import (
    ProposalStats,
    StatusConfig,
    VotingFlags,
    VotingWindow,
)
from src.data_models.schemas import ProposalWithDAO


# Database statuses that end the voting period regardless of block time
CLOSED_STATUSES = {"DEPLOYED", "FAILED"}

STATUS_ACTIVE = StatusConfig(
    icon="BarChart3",
    color="text-primary",
    bg="bg-primary/10",
    border="border-primary/20",
    label="Active",
)
STATUS_PASSED = StatusConfig(
    icon="CheckCircle",
    color="text-green-500",
    bg="bg-green-500/10",
    border="border-green-500/20",
    label="Passed",
)
STATUS_FAILED = StatusConfig(
    icon="XCircle",
    color="text-red-500",
    bg="bg-red-500/10",
    border="border-red-500/20",
    label="Failed",
)
STATUS_PENDING = StatusConfig(
    icon="AlertCircle",
    color="text-muted-foreground",
    bg="bg-muted/10",
    border="border-muted/20",
    label="Pending",
)


def get_status_config(is_active: bool, is_ended: bool, passed: bool) -> StatusConfig:
    if is_active:
        return STATUS_ACTIVE
    if is_ended and passed:
        return STATUS_PASSED
    if is_ended and not passed:
        return STATUS_FAILED
    return STATUS_PENDING


def voting_flags(
    window: Optional[VotingWindow],
    status: Optional[str],
    now: Optional[datetime] = None,
) -> VotingFlags:
    """Active/ended flags from the voting window's end time."""
    now = now or datetime.now(timezone.utc)
    end_time = window.end_time if window else None
    if end_time is None:
        return VotingFlags(is_active=False, is_ended=False)
    return VotingFlags(
        is_active=now < end_time and status not in CLOSED_STATUSES,
        is_ended=now > end_time,
    )


def block_voting_flags(current_block: int, vote_start: int, vote_end: int) -> VotingFlags:
    """Active/ended flags from the current burn block height."""
    if not current_block or not vote_end:
        return VotingFlags(is_active=False, is_ended=False)
    return VotingFlags(
        is_active=vote_start <= current_block < vote_end,
        is_ended=current_block >= vote_end,
    )


# ==================
# List page filtering
# ==================

SORT_FIELDS = ("newest", "oldest", "title", "votes", "status", "dao", "creator")
STATUS_FILTERS = ("PASSED", "DEPLOYED", "FAILED", "DRAFT")


def _dao_name(proposal: ProposalWithDAO) -> str:
    return (proposal.daos.name if proposal.daos else None) or ""


def filter_proposals(
    proposals: Iterable[ProposalWithDAO],
    search: Optional[str] = None,
    dao: Optional[str] = None,
    status: Optional[str] = None,
    creator: Optional[str] = None,
    hidden: Iterable[str] = (),
) -> List[ProposalWithDAO]:
    hidden_ids = set(hidden)
    search_term = search.lower() if search else None
    creator_term = creator.lower() if creator else None

    result = []
    for proposal in proposals:
        if proposal.id in hidden_ids:
            continue

        if search_term:
            matches = (
                search_term in (proposal.title or "").lower()
                or search_term in _dao_name(proposal).lower()
                or search_term in (proposal.creator or "").lower()
            )
            if not matches:
                continue

        if dao and dao != "all" and _dao_name(proposal) != dao:
            continue

        if status and status != "all":
            if status == "PASSED":
                if not proposal.passed:
                    continue
            elif proposal.status != status:
                continue

        if creator_term and creator_term not in (proposal.creator or "").lower():
            continue

        result.append(proposal)
    return result


def _created_key(proposal: ProposalWithDAO) -> datetime:
    if not proposal.created_at:
        return datetime.min.replace(tzinfo=timezone.utc)
    created = datetime.fromisoformat(proposal.created_at.replace("Z", "+00:00"))
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def _total_votes(proposal: ProposalWithDAO) -> int:
    return safe_int(proposal.votes_for) + safe_int(proposal.votes_against)


def sort_proposals(proposals: List[ProposalWithDAO], sort: str = "newest") -> List[ProposalWithDAO]:
    """Sort a proposal list; unknown sort keys keep the input order."""
    if sort == "newest":
        return sorted(proposals, key=_created_key, reverse=True)
    if sort == "oldest":
        return sorted(proposals, key=_created_key)
    if sort == "title":
        return sorted(proposals, key=lambda p: p.title or "")
    if sort == "votes":
        return sorted(proposals, key=_total_votes, reverse=True)
    if sort == "status":
        return sorted(proposals, key=lambda p: p.status or "")
    if sort == "dao":
        return sorted(proposals, key=_dao_name)
    if sort == "creator":
        return sorted(proposals, key=lambda p: p.creator or "")
    return list(proposals)


def proposal_stats(proposals: List[ProposalWithDAO]) -> ProposalStats:
    return ProposalStats(
        total=len(proposals),
        active=sum(1 for p in proposals if p.status == "DEPLOYED"),
        passed=sum(1 for p in proposals if p.passed is True),
        failed=sum(1 for p in proposals if p.status == "FAILED"),
    )
