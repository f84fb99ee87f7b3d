"""
Display formatting helpers shared by the dashboard routes.

Numbers coming from the chain are integer strings in micro-units; these
helpers turn them into the strings the dashboard shows. Rounding follows
JavaScript's ``Number.prototype.toFixed`` (half-up on the exact binary value)
so the API and the web client agree on every rendered figure.
"""
import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union

from src.config.settings import is_testnet

MICRO_STX = 1_000_000
TOKEN_MICRO_UNITS = 100_000_000
SATOSHIS_PER_BTC = 100_000_000

Numeric = Union[int, float, str]


def to_fixed(value: Union[int, float, Decimal], digits: int = 2) -> str:
    """Fixed-point string with half-up rounding, like JS ``toFixed``."""
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _group_thousands(fixed: str) -> str:
    whole, _, fraction = fixed.partition(".")
    sign = ""
    if whole.startswith("-"):
        sign, whole = "-", whole[1:]
    grouped = f"{int(whole):,}"
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def truncate_address(address: Optional[str], start_chars: int = 5, end_chars: int = 5) -> str:
    """Show only the first and last few characters of an address."""
    if not address:
        return ""
    if len(address) <= start_chars + end_chars:
        return address
    return f"{address[:start_chars]}...{address[-end_chars:]}"


def truncate_string(value: Optional[str], start_length: int, end_length: Optional[int] = None) -> str:
    if not value:
        return ""

    if end_length is not None:
        if len(value) <= start_length + end_length:
            return value
        return f"{value[:start_length]}...{value[-end_length:]}"

    if len(value) <= start_length:
        return value
    return value[:start_length] + "..."


def format_stacks_address(address: Optional[str]) -> str:
    if not address:
        return ""
    return address[:6] + "..." + address[-6:]


def format_number(num: Union[int, float]) -> str:
    """Format a number with a K/M/B suffix and two decimals."""
    if num >= 1e9:
        return f"{to_fixed(num / 1e9)}B"
    if num >= 1e6:
        return f"{to_fixed(num / 1e6)}M"
    if num >= 1e3:
        return f"{to_fixed(num / 1e3)}K"
    return to_fixed(num)


def format_stx_balance(balance: Optional[Numeric]) -> str:
    """microSTX to STX with two decimals."""
    if not balance:
        return "0"
    try:
        return to_fixed(float(balance) / MICRO_STX)
    except (TypeError, ValueError):
        return "0"


def format_token_balance(balance: Optional[Numeric]) -> str:
    """Token micro-units (8 decimals) to a grouped two-decimal string."""
    if not balance:
        return "0"
    try:
        return _group_thousands(to_fixed(float(balance) / TOKEN_MICRO_UNITS))
    except (TypeError, ValueError):
        return "0"


def format_stacks_amount(amount: Any) -> str:
    """
    Format an integer micro-STX amount with grouping and up to 6 decimals.

    Anything that is not an integer amount is returned unchanged.
    """
    try:
        value = Decimal(int(str(amount).strip())) / MICRO_STX
    except (TypeError, ValueError, InvalidOperation):
        return amount
    fixed = _group_thousands(to_fixed(value, 6))
    if "." in fixed:
        fixed = fixed.rstrip("0").rstrip(".")
    return fixed


def satoshi_to_btc(satoshis: Optional[Numeric]) -> str:
    if satoshis is None or satoshis == "":
        return "0.00000000"
    try:
        value = float(satoshis)
    except (TypeError, ValueError):
        return "0.00000000"
    if value != value:  # NaN
        return "0.00000000"
    return to_fixed(value / SATOSHIS_PER_BTC, 8)


def extract_token_name(full_token_id: Optional[str]) -> str:
    """
    Extract a token name from an asset identifier.

    ``SP...token-contract::TOKEN`` gives ``TOKEN``; without ``::`` the last
    dotted segment is used, cut at its first hyphen.
    """
    if not full_token_id:
        return ""

    if "::" in full_token_id:
        return full_token_id.split("::")[1]

    if "." in full_token_id:
        last_part = full_token_id.split(".")[-1]
        if "-" in last_part:
            return last_part.split("-")[0]
        return last_part

    return full_token_id


def format_action(action: Optional[str]) -> str:
    """Keep only the function/contract name after the last dot."""
    if not action:
        return ""
    return action.split(".")[-1]


def _twelve_hour(dt: datetime) -> int:
    return dt.hour % 12 or 12


def format_date(date: datetime) -> str:
    """e.g. ``Mar 5, 2025, 02:07 PM``"""
    return f"{date:%b} {date.day}, {date.year}, {_twelve_hour(date):02d}:{date:%M} {date:%p}"


def format_block_time(date: datetime) -> str:
    """e.g. ``Mar 5, 2025 at 2:07 PM``"""
    return f"{date:%b} {date.day}, {date.year} at {_twelve_hour(date)}:{date:%M} {date:%p}"


def create_dao_slug(name: str) -> str:
    slug = name.lower()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"--+", "-", slug)


def get_dao_url(name: str) -> str:
    return f"/daos/{create_dao_slug(name)}"


def _chain_param(network: Optional[str]) -> str:
    return "testnet" if is_testnet(network) else "mainnet"


def get_explorer_link(kind: str, identifier: str, network: Optional[str] = None) -> str:
    """Stacks explorer link for a transaction, address or contract."""
    paths = {
        "tx": f"/txid/{identifier}",
        "address": f"/address/{identifier}",
        "contract": f"/contract/{identifier}",
    }
    path = paths.get(kind, "")
    return f"https://explorer.stacks.co{path}?chain={_chain_param(network)}"


def get_address_explorer_url(address: str, network: Optional[str] = None) -> str:
    return f"https://explorer.hiro.so/address/{address}?chain={_chain_param(network)}"


def safe_int(value: Any) -> int:
    """Nullable numeric column to int, 0 when missing or unparsable."""
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def safe_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
