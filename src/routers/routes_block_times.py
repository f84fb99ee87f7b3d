from typing import Optional

from fastapi import Depends
from fastapi.responses import JSONResponse

from src.config.settings import BLOCK_TIMES_RESPONSE_MAX_AGE
from src.core.block_time import BlockTimeResolver
from src.data_models.governance_schemas import BlockTimesResponse
from src.routers.deps import get_block_time_resolver
from src.utils.logger import logger


def parse_block_param(value: Optional[str]) -> int:
    """Leading integer of a query value; 0 when there is none."""
    digits = ""
    for char in (value or "").strip():
        if char.isdigit() or (char in "+-" and not digits):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return 0


async def get_block_times(
    startBlock: Optional[str] = None,
    endBlock: Optional[str] = None,
    resolver: BlockTimeResolver = Depends(get_block_time_resolver),
):
    """
    Burn block times of a voting window's start and end blocks.

    A block that has not been mined yet comes back as null.
    """
    start_block = parse_block_param(startBlock)
    end_block = parse_block_param(endBlock)

    if not start_block or not end_block:
        return JSONResponse(
            {"error": "startBlock and endBlock parameters are required"},
            status_code=400,
        )

    try:
        times = await resolver.fetch_block_times(start_block, end_block, raise_errors=True)
    except Exception as e:
        logger.error(f"Error fetching block times: {e}")
        return JSONResponse({"error": "Failed to fetch block times"}, status_code=500)

    return JSONResponse(
        BlockTimesResponse(**times).model_dump(),
        headers={"Cache-Control": f"public, max-age={BLOCK_TIMES_RESPONSE_MAX_AGE}"},
    )
