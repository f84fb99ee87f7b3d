"""
Shared upstream clients for route handlers.

Each client is created once per process and handed to routes through
FastAPI dependencies, so tests can swap them with
``app.dependency_overrides``. Blocking database queries called from
async routes go through ``run_query``.
"""
import threading
from typing import Any, Callable, Dict, TypeVar

from fastapi.concurrency import run_in_threadpool

from src.core.block_time import BlockTimeResolver
from src.exceptions import classify_exception
from src.services.contract_cache_client import ContractCacheClient
from src.services.hiro_client import HiroAPIClient
from src.services.stacks_node_client import StacksNodeClient
from src.services.tools_client import ToolsAPIClient
from src.utils.logger import logger

T = TypeVar("T")

_instances: Dict[str, Any] = {}
_instances_lock = threading.RLock()


def _singleton(name: str, factory: Callable[[], T]) -> T:
    with _instances_lock:
        if name not in _instances:
            logger.info(f"Initializing {name}")
            _instances[name] = factory()
        return _instances[name]


def get_hiro_client() -> HiroAPIClient:
    return _singleton("hiro_client", HiroAPIClient)


def get_stacks_node_client() -> StacksNodeClient:
    return _singleton("stacks_node_client", StacksNodeClient)


def get_contract_cache_client() -> ContractCacheClient:
    return _singleton("contract_cache_client", ContractCacheClient)


def get_tools_client() -> ToolsAPIClient:
    return _singleton("tools_client", ToolsAPIClient)


def get_block_time_resolver() -> BlockTimeResolver:
    return _singleton("block_time_resolver", lambda: BlockTimeResolver(get_hiro_client()))


async def close_clients() -> None:
    """Close every HTTP client created so far."""
    with _instances_lock:
        instances = list(_instances.values())
        _instances.clear()

    for instance in instances:
        close = getattr(instance, "close", None)
        if close is not None:
            try:
                await close()
            except Exception as e:
                logger.warning(f"Error closing {type(instance).__name__}: {e}")


async def run_query(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking Supabase query in the threadpool.

    Failures surface as DashboardError so the app's handler renders them
    as JSON.
    """
    try:
        return await run_in_threadpool(func, *args, **kwargs)
    except Exception as e:
        error = classify_exception(e)
        logger.error(f"{getattr(func, '__name__', func)} failed: {error.message}")
        raise error from e
