"""
Burn block wall-clock times and estimates.

Voting windows are defined in Bitcoin burn block heights. Mined blocks get
their time from the Hiro API; blocks that do not exist yet are placed by
extrapolating the network's average block interval from a known block.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from src.config.settings import BLOCK_TIME_CACHE_SECONDS, STACKS_NETWORK, is_testnet
from src.data_models.governance_schemas import VotingWindow
from src.services.hiro_client import HiroAPIClient, HiroAPIError
from src.services.response_cache import TTLCache
from src.utils.logger import logger

TESTNET_BLOCK_INTERVAL = timedelta(minutes=4)
MAINNET_BLOCK_INTERVAL = timedelta(minutes=12)


@dataclass
class BlockReference:
    """A block with a known time, used to extrapolate others."""
    block: int
    time: datetime


def average_block_interval(network: str = None) -> timedelta:
    return TESTNET_BLOCK_INTERVAL if is_testnet(network) else MAINNET_BLOCK_INTERVAL


def estimate_block_time(
    target_block: int,
    reference_block: int,
    reference_time: datetime,
    network: str = None,
) -> datetime:
    """Time of ``target_block`` assuming the average interval since the reference."""
    return reference_time + (target_block - reference_block) * average_block_interval(network)


def parse_block_time(iso_time: Optional[str]) -> Optional[datetime]:
    if not iso_time:
        return None
    parsed = datetime.fromisoformat(iso_time.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_block_time(iso_time: Any) -> Optional[datetime]:
    """Like ``parse_block_time``, but a malformed value gives None."""
    try:
        return parse_block_time(iso_time)
    except (AttributeError, TypeError, ValueError) as e:
        logger.error(f"Unreadable burn block time {iso_time!r}: {e}")
        return None


class BlockTimeResolver:
    """Resolves burn block heights to times through the Hiro API with a TTL cache."""

    def __init__(
        self,
        hiro_client: Optional[HiroAPIClient] = None,
        cache: Optional[TTLCache] = None,
        network: str = None,
    ):
        self.network = network or STACKS_NETWORK
        self.hiro_client = hiro_client or HiroAPIClient(network=self.network)
        self.cache = cache or TTLCache(BLOCK_TIME_CACHE_SECONDS, name="block-times")

    def _estimate(self, height: int, fallback: BlockReference) -> datetime:
        estimated = estimate_block_time(height, fallback.block, fallback.time, self.network)
        logger.info(f"Estimated time of burn block {height} from block {fallback.block}: {estimated.isoformat()}")
        return estimated

    async def get_block_time(self, height: int, fallback: Optional[BlockReference] = None) -> Optional[datetime]:
        """
        Time of a burn block.

        A block the API does not know yet (404), an unreachable API, or a
        response without a readable time is estimated from ``fallback`` when
        one is given. Other error statuses give None.
        """
        if not height:
            return None

        try:
            data = await self.hiro_client.get_burn_block(height)
        except HiroAPIError as e:
            if e.status_code is None:
                logger.error(f"Error fetching burn block data: {e}")
            elif e.status_code != 404:
                return None
            return self._estimate(height, fallback) if fallback else None

        iso_time = data.get("burn_block_time_iso") if isinstance(data, dict) else None
        block_time = read_block_time(iso_time)
        if block_time is None and fallback:
            return self._estimate(height, fallback)
        return block_time

    async def _cached_block_time(self, height: int) -> Optional[str]:
        key = f"burn-block:{self.network}:{height}"
        return await self.cache.get_or_fetch(key, lambda: self.hiro_client.get_burn_block_time(height))

    async def fetch_block_times(
        self,
        start_block: int,
        end_block: int,
        raise_errors: bool = False,
    ) -> Dict[str, Optional[str]]:
        """
        ISO times of the start and end blocks, looked up in parallel.

        Blocks without a time come back as None. If a lookup fails outright,
        both are None, or the error propagates when ``raise_errors`` is set.
        """
        try:
            start_time, end_time = await asyncio.gather(
                self._cached_block_time(start_block),
                self._cached_block_time(end_block),
            )
        except HiroAPIError as e:
            logger.error(f"Error fetching block times {start_block}-{end_block}: {e}")
            if raise_errors:
                raise
            start_time, end_time = None, None

        return {"startBlockTime": start_time, "endBlockTime": end_time}

    async def resolve_voting_window(
        self,
        start_block: int,
        end_block: int,
        now: Optional[datetime] = None,
    ) -> VotingWindow:
        """
        Wall-clock voting window of a proposal.

        A missing start time is assumed to be one block interval ago; a
        missing end time is extrapolated from the start and marked estimated.
        """
        times = await self.fetch_block_times(start_block, end_block)
        start_time = read_block_time(times["startBlockTime"])
        end_time = read_block_time(times["endBlockTime"])
        is_end_estimated = False

        if start_time is None:
            logger.error(f"Start block {start_block} time not found, assuming a recent start")
            start_time = (now or datetime.now(timezone.utc)) - average_block_interval(self.network)

        if end_time is None:
            end_time = estimate_block_time(end_block, start_block, start_time, self.network)
            is_end_estimated = True

        return VotingWindow(
            start_block=start_block,
            end_block=end_block,
            start_time=start_time,
            end_time=end_time,
            is_end_estimated=is_end_estimated,
        )
