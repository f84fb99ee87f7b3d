from typing import List, Optional

from supabase import Client

from src.data_models.schemas import Job
from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger

JOB_COLUMNS = """
    *,
    tasks (
        name
    )
"""


def fetch_jobs(agent_id: Optional[str], profile_id: Optional[str], client: Optional[Client] = None) -> List[Job]:
    """
    Task runs of one agent for its owner, newest first.

    Jobs not tied to a task are left out. Database errors are logged and
    give an empty list.
    """
    if not agent_id or not profile_id:
        return []

    try:
        client = client or get_supabase_client()
        response = (
            client.table("jobs")
            .select(JOB_COLUMNS)
            .eq("agent_id", agent_id)
            .eq("profile_id", profile_id)
            .not_.is_("task_id", "null")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching jobs: {e}")
        return []

    jobs = []
    for row in response.data or []:
        task = row.pop("tasks", None) or {}
        jobs.append(Job(**row, task_name=task.get("name")))
    return jobs
