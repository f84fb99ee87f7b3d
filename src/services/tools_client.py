"""
Client for the agent backend's tool catalog.
"""
from typing import List, Optional

import httpx

from src.config.settings import API_URL, HTTP_TIMEOUT_SECONDS
from src.data_models.schemas import Tool
from src.exceptions import ConfigurationError, UpstreamAPIError
from src.utils.logger import logger


class ToolsAPIClient:
    def __init__(self, base_url: Optional[str] = None, timeout: float = HTTP_TIMEOUT_SECONDS,
                 client: httpx.AsyncClient = None):
        self.base_url = (base_url or API_URL or "").rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_tools(self) -> List[Tool]:
        """All tools agents can be configured with."""
        if not self.base_url:
            raise ConfigurationError("API_URL is not configured.")

        try:
            response = await self.client.get(f"{self.base_url}/tools/available")
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch tools: {e}")
            raise UpstreamAPIError("Failed to fetch tools from API") from e

        if not response.is_success:
            logger.error(f"Failed to fetch tools: {response.status_code}")
            raise UpstreamAPIError("Failed to fetch tools from API", status_code=response.status_code)

        return [Tool.model_validate(item) for item in response.json()]

    async def close(self):
        await self.client.aclose()


def filter_tools_by_category(tools: List[Tool], category: str) -> List[Tool]:
    return [tool for tool in tools if tool.category == category]


def filter_tools_by_ids(tools: List[Tool], ids: List[str]) -> List[Tool]:
    wanted = set(ids)
    return [tool for tool in tools if tool.id in wanted]


def find_tool_by_id(tools: List[Tool], tool_id: str) -> Optional[Tool]:
    return next((tool for tool in tools if tool.id == tool_id), None)


def get_tool_ids(tools: List[Tool]) -> List[str]:
    return [tool.id for tool in tools]
