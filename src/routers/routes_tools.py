from typing import List, Optional

from fastapi import Depends

from src.data_models.schemas import Tool
from src.routers.deps import get_tools_client
from src.services.tools_client import ToolsAPIClient, filter_tools_by_category


async def list_tools(
    category: Optional[str] = None,
    tools_client: ToolsAPIClient = Depends(get_tools_client),
) -> List[Tool]:
    """Tools available to agents, optionally limited to one category."""
    tools = await tools_client.fetch_tools()
    if category:
        return filter_tools_by_category(tools, category)
    return tools
