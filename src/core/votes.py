"""
Vote extraction and tally math for DAO action proposals.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

from src.core.formatting import safe_int
from src.data_models.governance_schemas import VoteTally

VOTE_DECIMALS = 100_000_000

_BIGINT_SUFFIX = re.compile(r"n$")


def _field(data: Dict[str, Any], camel: str, kebab: str) -> Any:
    entry = data.get(camel, data.get(kebab))
    if isinstance(entry, dict):
        return entry.get("value")
    return None


def extract_votes(proposal_json: Any) -> Optional[Dict[str, Optional[str]]]:
    """
    Project the vote counts out of a decoded ``get-proposal`` result.

    The read-only call returns ``(optional (tuple ...))`` so the tuple
    fields sit two ``value`` levels down. Returns None when the structure
    cannot be navigated; callers then fall back to the full result.
    """
    try:
        proposal_data = proposal_json["value"]["value"]
    except (KeyError, TypeError):
        return None
    if not isinstance(proposal_data, dict) or not proposal_data:
        return None
    return {
        "votesFor": _field(proposal_data, "votesFor", "votes-for"),
        "votesAgainst": _field(proposal_data, "votesAgainst", "votes-against"),
    }


def parse_vote_count(raw: Union[str, int, float, None]) -> str:
    """Normalize a vote count to a decimal string, dropping a bigint ``n`` suffix."""
    if isinstance(raw, bool) or raw is None:
        return "0"
    if isinstance(raw, (int, float)):
        return str(int(raw)) if float(raw).is_integer() else str(raw)
    if isinstance(raw, str):
        cleaned = _BIGINT_SUFFIX.sub("", raw.strip())
        try:
            float(cleaned)
        except ValueError:
            return "0"
        return cleaned
    return "0"


def format_votes(votes: Union[int, float, str, None]) -> str:
    """Raw vote amount to token units (8 decimals)."""
    if votes is None:
        return "0"
    try:
        amount = Decimal(str(votes).strip())
    except InvalidOperation:
        return "0"
    if not amount.is_finite() or amount == 0:
        return "0"
    adjusted = amount / VOTE_DECIMALS
    if adjusted == adjusted.to_integral_value():
        return str(int(adjusted))
    return format(adjusted.normalize(), "f")


def tally_votes(votes_for: Any, votes_against: Any, liquid_tokens: Any) -> VoteTally:
    """Shares of the liquid supply and of cast votes for each side."""
    for_count = safe_int(votes_for)
    against_count = safe_int(votes_against)
    liquid = safe_int(liquid_tokens)
    total = for_count + against_count

    percentage_for = (for_count / liquid) * 100 if liquid > 0 else 0.0
    percentage_against = (against_count / liquid) * 100 if liquid > 0 else 0.0

    return VoteTally(
        votes_for=for_count,
        votes_against=against_count,
        total_votes=total,
        liquid_tokens=liquid,
        percentage_for=percentage_for,
        percentage_against=percentage_against,
        percentage_remaining=max(0.0, 100 - percentage_for - percentage_against),
        cast_percentage_for=(for_count / total) * 100 if total > 0 else 0.0,
        cast_percentage_against=(against_count / total) * 100 if total > 0 else 0.0,
    )
